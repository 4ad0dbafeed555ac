#!/usr/bin/env python3
"""
copr-publish CLI - publish the latest changelog version of a package to Copr.

Usage:
    copr-publish [OPTIONS] [PROJECT]

    Run from the root of a packaging checkout that has debian/changelog
    and a <package>.spec.rpkg template.

Examples:
    copr-publish
    copr-publish --dry-run
    copr-publish --package system76-power system76
    copr-publish --print-completion > /etc/bash_completion.d/system76-power
"""

import argparse
import configparser
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from coprpublish import __version__
from coprpublish.completion import render_bash
from coprpublish.copr import BuildStatus
from coprpublish.exceptions import CoprPublishError, ParseError
from coprpublish.publisher import PublishResult, PublishSettings, ReleasePublisher

logger = logging.getLogger(__name__)

CONFIG_SECTION = "copr-publish"
CONFIG_KEYS = ("package", "project", "changelog", "spec_file", "remote", "branch", "outdir")


def config_paths() -> list[Path]:
    """Config files in increasing order of precedence."""
    return [
        Path("/etc/copr-publish.conf"),
        Path.home() / ".config" / "copr-publish" / "config",
        Path(".copr-publish.conf"),
    ]


def load_config(paths: Optional[list[Path]] = None) -> dict[str, Optional[str]]:
    """Load publish defaults from [copr-publish] sections, later files win."""
    out: dict[str, Optional[str]] = {key: None for key in CONFIG_KEYS}
    for path in paths if paths is not None else config_paths():
        if not path.exists():
            continue
        config = configparser.ConfigParser()
        try:
            config.read(path, encoding="utf-8")
        except (configparser.Error, OSError) as e:
            logger.warning(f"Ignoring unreadable config {path}: {e}")
            continue
        if not config.has_section(CONFIG_SECTION):
            continue
        section = config[CONFIG_SECTION]
        for key in CONFIG_KEYS:
            value = section.get(key) or section.get(key.replace("_", "-"))
            if value:
                out[key] = value.strip()
    return out


def load_copr_cli_config(path: Optional[str] = None) -> dict[str, Optional[str]]:
    """Read copr_url from copr-cli's own config (~/.config/copr)."""
    out: dict[str, Optional[str]] = {"copr_url": None}
    config_path = Path(os.path.expanduser(path)) if path else Path.home() / ".config" / "copr"
    if not config_path.exists():
        return out
    config = configparser.ConfigParser()
    try:
        config.read(config_path, encoding="utf-8")
        if config.has_section("copr-cli") and config["copr-cli"].get("copr_url"):
            out["copr_url"] = config["copr-cli"]["copr_url"].strip()
    except (configparser.Error, OSError):
        pass
    return out


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging based on verbosity."""
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        force=True,
    )


def create_parser(config: Optional[dict[str, Optional[str]]] = None) -> argparse.ArgumentParser:
    """Create argument parser."""
    cfg = config if config is not None else load_config()
    defaults = PublishSettings()

    parser = argparse.ArgumentParser(
        prog="copr-publish",
        description="Bump, build, tag and submit an rpkg package to Copr",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Publish the latest debian/changelog version to the default project
  copr-publish

  # Show the version and release that would be published
  copr-publish --resolve-only

  # Submit without waiting, then poll the Copr API for the result
  copr-publish --poll my-project

Exit codes:
  1 missing changelog, 2 non-numeric release, 3 parse error,
  4 package build failure, 5 Copr failure, 6 push failure, 7 git/rpkg failure
""",
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")

    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress non-error output")

    pkg_group = parser.add_argument_group("Package options")

    pkg_group.add_argument(
        "--package",
        metavar="NAME",
        default=cfg.get("package") or defaults.package,
        help="Package name as written in the changelog (default: %(default)s)",
    )

    pkg_group.add_argument(
        "--changelog",
        metavar="FILE",
        default=cfg.get("changelog") or defaults.changelog,
        help="Debian changelog (default: %(default)s)",
    )

    pkg_group.add_argument(
        "--spec-file",
        metavar="FILE",
        default=cfg.get("spec_file"),
        help="rpkg spec template (default: <package>.spec.rpkg)",
    )

    pkg_group.add_argument(
        "--outdir",
        metavar="DIR",
        default=cfg.get("outdir") or defaults.outdir,
        help="Temporary build directory (default: %(default)s)",
    )

    git_group = parser.add_argument_group("Git options")

    git_group.add_argument(
        "--remote",
        default=cfg.get("remote") or defaults.remote,
        help="Remote to merge from (default: %(default)s)",
    )

    git_group.add_argument(
        "--branch",
        default=cfg.get("branch") or defaults.branch,
        help="Branch to publish from (default: %(default)s)",
    )

    copr_group = parser.add_argument_group("Copr options")

    copr_group.add_argument(
        "--copr-config",
        metavar="FILE",
        help="copr-cli config file (default: ~/.config/copr)",
    )

    copr_group.add_argument(
        "--copr-url",
        metavar="URL",
        help="Copr frontend URL (default: from copr-cli config or Fedora Copr)",
    )

    wait_group = copr_group.add_mutually_exclusive_group()

    wait_group.add_argument(
        "--nowait", action="store_true", help="Do not wait for the Copr build to finish"
    )

    wait_group.add_argument(
        "--poll", action="store_true", help="Wait for the Copr build by polling its API"
    )

    mode_group = parser.add_argument_group("Mode options").add_mutually_exclusive_group()

    mode_group.add_argument(
        "--resolve-only",
        action="store_true",
        help="Only print the version and release that would be published",
    )

    mode_group.add_argument(
        "--dry-run", action="store_true", help="Resolve the release, change nothing"
    )

    mode_group.add_argument(
        "--print-completion",
        action="store_true",
        help="Print the system76-power bash completion script and exit",
    )

    parser.add_argument(
        "project",
        nargs="?",
        default=cfg.get("project") or defaults.project,
        help="Copr project, NAME or OWNER/NAME (default: %(default)s)",
    )

    return parser


def settings_from_args(opts: argparse.Namespace) -> PublishSettings:
    """Build PublishSettings from parsed options."""
    copr_url = opts.copr_url or load_copr_cli_config(opts.copr_config).get("copr_url")
    settings = PublishSettings(
        package=opts.package,
        project=opts.project,
        changelog=opts.changelog,
        spec_file=opts.spec_file,
        remote=opts.remote,
        branch=opts.branch,
        outdir=opts.outdir,
        copr_config=opts.copr_config,
        nowait=opts.nowait,
        poll=opts.poll,
    )
    if copr_url:
        settings.copr_url = copr_url
    return settings


def print_publish_result(result: PublishResult) -> None:
    """Print publish result summary."""
    release = result.release

    print("\n" + "=" * 60)
    print("DRY RUN" if result.dry_run else "PUBLISH SUMMARY")
    print("=" * 60)
    print(f"Package: {release.package}")
    print(f"Version: {release.version}")
    print(f"Release: {release.release}")
    print(f"Tag: {release.tag}")

    if result.srpm_path:
        print(f"SRPM: {result.srpm_path}")

    if result.task:
        status_icon = {
            BuildStatus.COMPLETE: "✓",
            BuildStatus.FAILED: "✗",
            BuildStatus.BUILDING: "⏳",
            BuildStatus.PENDING: "○",
            BuildStatus.CANCELED: "⊘",
        }.get(result.task.status, "?")
        print(f"Copr: {status_icon} {result.task.project}: {result.task.status.value}")
        if result.task.build_id:
            print(f"      Build ID: {result.task.build_id}")

    if not result.dry_run:
        print(f"Total time: {result.total_time:.1f} seconds")

    print("=" * 60)


def cmd_resolve(settings: PublishSettings) -> int:
    """Print the version and release that would be published."""
    publisher = ReleasePublisher(settings)
    release = publisher.resolve()
    print(f"version={release.version}")
    print(f"release={release.release}")
    return 0


def cmd_publish(settings: PublishSettings, dry_run: bool = False) -> int:
    """Run the publish sequence."""
    publisher = ReleasePublisher(settings)
    result = publisher.publish(dry_run=dry_run)
    print_publish_result(result)
    return 0 if result.success else 1


def main(args: Optional[list[str]] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    opts = parser.parse_args(args)

    if opts.print_completion:
        sys.stdout.write(render_bash())
        return 0

    setup_logging(opts.verbose, opts.quiet)

    settings = settings_from_args(opts)

    try:
        if opts.resolve_only:
            return cmd_resolve(settings)
        return cmd_publish(settings, dry_run=opts.dry_run)

    except CoprPublishError as e:
        logging.error(str(e))
        return e.exit_code
    except OSError as e:
        logging.error(f"I/O error: {e}")
        return ParseError.exit_code


if __name__ == "__main__":
    sys.exit(main())
