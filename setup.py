#!/usr/bin/env python3
"""Setup script for copr-publish."""

from setuptools import setup, find_packages
from pathlib import Path

here = Path(__file__).parent.resolve()
long_description = (here / "README.md").read_text(encoding="utf-8", errors="ignore") if (here / "README.md").exists() else ""

setup(
    name="copr-publish",
    version="0.1.0",
    description="Bump, build, tag and submit rpkg packages to Fedora Copr",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="copr-publish Team",
    author_email="copr-publish@example.com",
    url="https://github.com/copr-publish/copr-publish",
    license="MIT",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Build Tools",
        "Topic :: System :: Software Distribution",
    ],
    keywords="copr, rpkg, rpm, srpm, release, fedora, debian changelog",
    packages=find_packages(exclude=["tests", "tests.*", "docs"]),
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.25.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "pytest-cov>=4.0",
            "pytest-mock>=3.10",
            "black>=23.0",
            "isort>=5.12",
            "mypy>=1.0",
            "flake8>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "copr-publish=coprpublish.cli:main",
        ],
    },
    project_urls={
        "Bug Reports": "https://github.com/copr-publish/copr-publish/issues",
        "Source": "https://github.com/copr-publish/copr-publish",
    },
)
