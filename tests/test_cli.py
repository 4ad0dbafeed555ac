"""Tests for coprpublish.cli module."""

import logging

import pytest
from unittest.mock import patch

from coprpublish.cli import (
    cmd_publish,
    cmd_resolve,
    create_parser,
    load_config,
    load_copr_cli_config,
    main,
    print_publish_result,
    settings_from_args,
    setup_logging,
)
from coprpublish.copr import BuildStatus, BuildTask
from coprpublish.exceptions import (
    ChangelogParseError,
    CoprBuildError,
    PushError,
    ReleaseTagError,
    SourcePackageBuildError,
    VersionControlError,
)
from coprpublish.publisher import PublishResult
from coprpublish.resolver import ResolvedRelease


@pytest.fixture
def release():
    return ResolvedRelease(package="system76-power", version="1.1.20", release=2)


class TestLoadConfig:
    def test_missing_files(self, tmp_path):
        cfg = load_config([tmp_path / "nope.conf"])

        assert all(value is None for value in cfg.values())

    def test_later_files_win(self, tmp_path):
        first = tmp_path / "first.conf"
        first.write_text("[copr-publish]\npackage = first\nproject = proj\n")
        second = tmp_path / "second.conf"
        second.write_text("[copr-publish]\npackage = second\nspec-file = custom.spec.rpkg\n")

        cfg = load_config([first, second])

        assert cfg["package"] == "second"
        assert cfg["project"] == "proj"
        assert cfg["spec_file"] == "custom.spec.rpkg"

    def test_other_sections_ignored(self, tmp_path):
        path = tmp_path / "config"
        path.write_text("[other]\npackage = nope\n")

        assert load_config([path])["package"] is None

    def test_copr_cli_config(self, tmp_path):
        path = tmp_path / "copr"
        path.write_text("[copr-cli]\nlogin = abc\ncopr_url = https://copr.example.com\n")

        assert load_copr_cli_config(str(path))["copr_url"] == "https://copr.example.com"

    def test_copr_cli_config_missing(self, tmp_path):
        assert load_copr_cli_config(str(tmp_path / "copr"))["copr_url"] is None


class TestCreateParser:
    def test_parser_created(self):
        parser = create_parser({})

        assert parser.prog == "copr-publish"

    def test_defaults(self):
        args = create_parser({}).parse_args([])

        assert args.package == "system76-power"
        assert args.project == "system76"
        assert args.changelog == "debian/changelog"
        assert args.spec_file is None
        assert args.remote == "upstream"
        assert args.branch == "master"
        assert args.outdir == ".rpkg-build"

    def test_config_defaults(self):
        args = create_parser({"package": "pkg", "project": "owner/proj"}).parse_args([])

        assert args.package == "pkg"
        assert args.project == "owner/proj"

    def test_options_override_config(self):
        parser = create_parser({"package": "pkg"})

        args = parser.parse_args(["--package", "other", "myproject"])

        assert args.package == "other"
        assert args.project == "myproject"

    def test_nowait_and_poll_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser({}).parse_args(["--nowait", "--poll"])

    def test_modes_exclusive(self):
        with pytest.raises(SystemExit):
            create_parser({}).parse_args(["--dry-run", "--resolve-only"])


class TestSettingsFromArgs:
    def test_copr_url_option(self):
        args = create_parser({}).parse_args(["--copr-url", "https://copr.example.com"])

        settings = settings_from_args(args)

        assert settings.copr_url == "https://copr.example.com"

    def test_copr_url_from_copr_cli_config(self, tmp_path):
        path = tmp_path / "copr"
        path.write_text("[copr-cli]\ncopr_url = https://copr.internal\n")
        args = create_parser({}).parse_args(["--copr-config", str(path)])

        settings = settings_from_args(args)

        assert settings.copr_url == "https://copr.internal"
        assert settings.copr_config == str(path)

    def test_spec_file_default(self):
        args = create_parser({}).parse_args(["--package", "pkg"])

        assert settings_from_args(args).spec_file == "pkg.spec.rpkg"


class TestSetupLogging:
    def test_default_level_info(self):
        root_logger = logging.getLogger()
        root_logger.handlers = []
        root_logger.setLevel(logging.NOTSET)
        setup_logging()

        assert root_logger.level == logging.INFO

    def test_verbose_level_debug(self):
        root_logger = logging.getLogger()
        root_logger.handlers = []
        root_logger.setLevel(logging.NOTSET)
        setup_logging(verbose=True)

        assert root_logger.level == logging.DEBUG

    def test_quiet_level_warning(self):
        root_logger = logging.getLogger()
        root_logger.handlers = []
        root_logger.setLevel(logging.NOTSET)
        setup_logging(quiet=True)

        assert root_logger.level == logging.WARNING

    def test_bad_config_does_not_preempt_logging(self, tmp_path):
        bad = tmp_path / ".copr-publish.conf"
        bad.write_text("not an ini\n")
        root_logger = logging.getLogger()
        root_logger.handlers = []
        root_logger.setLevel(logging.NOTSET)

        load_config([bad])
        setup_logging(verbose=True)

        assert root_logger.level == logging.DEBUG
        assert root_logger.handlers[-1].formatter._fmt == "%(asctime)s [%(levelname)s] %(message)s"


class TestPrintPublishResult:
    def test_prints_release(self, capsys, release):
        task = BuildTask(
            project="system76",
            srpm_path="/tmp/pkg.src.rpm",
            build_id=12345,
            status=BuildStatus.COMPLETE,
        )

        print_publish_result(PublishResult(release=release, task=task, total_time=60.0))

        captured = capsys.readouterr()
        assert "PUBLISH SUMMARY" in captured.out
        assert "system76-power-1.1.20-2" in captured.out
        assert "12345" in captured.out
        assert "60.0" in captured.out

    def test_prints_dry_run(self, capsys, release):
        print_publish_result(PublishResult(release=release, dry_run=True))

        captured = capsys.readouterr()
        assert "DRY RUN" in captured.out
        assert "Total time" not in captured.out


class TestCommands:
    def test_cmd_resolve(self, capsys, release):
        with patch("coprpublish.cli.ReleasePublisher") as mock_publisher:
            mock_publisher.return_value.resolve.return_value = release
            result = cmd_resolve(settings_from_args(create_parser({}).parse_args([])))

        assert result == 0
        captured = capsys.readouterr()
        assert "version=1.1.20" in captured.out
        assert "release=2" in captured.out

    def test_cmd_publish_dry_run(self, capsys, release):
        with patch("coprpublish.cli.ReleasePublisher") as mock_publisher:
            mock_publisher.return_value.publish.return_value = PublishResult(
                release=release, dry_run=True
            )
            result = cmd_publish(
                settings_from_args(create_parser({}).parse_args([])), dry_run=True
            )

        assert result == 0
        mock_publisher.return_value.publish.assert_called_once_with(dry_run=True)


class TestMain:
    def test_print_completion(self, capsys):
        result = main(["--print-completion"])

        assert result == 0
        assert "complete -F _system76_power system76-power" in capsys.readouterr().out

    def test_missing_changelog_exit_code(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        assert main(["--resolve-only"]) == 1

    def test_resolve_only_end_to_end(self, checkout, monkeypatch, capsys):
        monkeypatch.chdir(checkout)

        with patch("coprpublish.publisher.GitRepository") as mock_git:
            mock_git.return_value.list_tags.return_value = ["system76-power-1.1.20-1"]
            result = main(["--resolve-only"])

        assert result == 0
        captured = capsys.readouterr()
        assert "version=1.1.20" in captured.out
        assert "release=2" in captured.out

    @pytest.mark.parametrize(
        "error,code",
        [
            (ReleaseTagError("Release should be a number"), 2),
            (ChangelogParseError("no entry"), 3),
            (SourcePackageBuildError("rpkg local failed"), 4),
            (CoprBuildError("Copr build failed"), 5),
            (PushError("Git push failed"), 6),
            (VersionControlError("git merge failed"), 7),
            (FileNotFoundError("Spec file not found"), 3),
        ],
    )
    def test_error_exit_codes(self, error, code):
        with patch("coprpublish.cli.cmd_publish", side_effect=error):
            assert main([]) == code

    def test_verbose_sets_logging(self):
        with patch("coprpublish.cli.cmd_publish", return_value=0):
            with patch("coprpublish.cli.setup_logging") as mock_logging:
                main(["-v"])

        mock_logging.assert_called_with(True, False)

    def test_dry_run_passed(self):
        with patch("coprpublish.cli.cmd_publish", return_value=0) as mock_cmd:
            result = main(["--dry-run"])

        assert result == 0
        assert mock_cmd.call_args[1]["dry_run"] is True
