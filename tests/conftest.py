"""
Pytest configuration and fixtures for copr-publish tests.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock


@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_changelog(fixtures_dir):
    """Path to the debian changelog fixture."""
    return fixtures_dir / "changelog"


@pytest.fixture
def sample_spec(fixtures_dir):
    """Path to the system76-power.spec.rpkg fixture."""
    return fixtures_dir / "system76-power.spec.rpkg"


@pytest.fixture
def sample_spec_content():
    """Minimal spec template content for testing."""
    return """Name:       pkg
Version:    1.0.0
Release:    1
Summary:    Test package

BuildRequires:  gcc

%description
Test package.

%files
%doc README.md
"""


@pytest.fixture
def checkout(tmp_path, sample_changelog, sample_spec):
    """A packaging checkout with debian/changelog and a spec template."""
    (tmp_path / "debian").mkdir()
    (tmp_path / "debian" / "changelog").write_text(sample_changelog.read_text())
    (tmp_path / "system76-power.spec.rpkg").write_text(sample_spec.read_text())
    return tmp_path


@pytest.fixture
def mock_subprocess_run(mocker):
    """Mock subprocess.run for testing."""
    mock = mocker.patch("subprocess.run")
    mock.return_value.returncode = 0
    mock.return_value.stdout = ""
    mock.return_value.stderr = ""
    return mock


@pytest.fixture
def mock_requests(mocker):
    """Mock requests library for testing HTTP calls."""
    mock = mocker.patch("coprpublish.copr.requests")
    mock.RequestException = Exception
    mock.get.return_value.status_code = 200
    mock.get.return_value.json.return_value = {}
    return mock


@pytest.fixture
def mock_git():
    """Mock GitRepository for testing without a real repository."""
    git = Mock()
    git.list_tags.return_value = []
    return git


@pytest.fixture
def mock_rpkg(tmp_path):
    """Mock RpkgClient that pretends to build an SRPM."""
    rpkg = Mock()
    rpkg.find_srpm.return_value = str(tmp_path / "system76-power-1.1.20-1.src.rpm")
    return rpkg


@pytest.fixture
def mock_copr():
    """Mock CoprClient for testing without Copr."""
    from coprpublish.copr import BuildStatus, BuildTask

    copr = Mock()
    copr.submit_build.side_effect = lambda project, srpm, nowait=False: BuildTask(
        project=project,
        srpm_path=srpm,
        build_id=4242,
        status=BuildStatus.BUILDING if nowait else BuildStatus.COMPLETE,
    )
    return copr


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: mark test as unit test")
    config.addinivalue_line("markers", "integration: mark test as integration test")
