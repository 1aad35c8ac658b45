"""Command line entry point: search Jira and mail release notes."""

from __future__ import annotations

import argparse
from pathlib import Path
import sys
from typing import Iterable, Optional, TextIO

from dotenv import load_dotenv

from releasenotes.config import TRANSPORTS, build_config
from releasenotes.errors import ReleaseNotesError
from releasenotes.logging_config import configure_logging, get_logger
from releasenotes.pipeline import (
    RunOutcome,
    build_search_client,
    build_transport,
    send_release_notes,
)


def _candidate_dotenv_paths(source_path: Path) -> list[Path]:
    """Return potential ``.env`` locations ordered by precedence."""

    package_root = source_path.resolve().parent
    candidates: list[Path] = [Path.cwd() / ".env"]
    for parent in [package_root, *package_root.parents]:
        if (parent / "pyproject.toml").exists() or (parent / ".git").exists():
            candidates.append(parent / ".env")
            break
    candidates.append(package_root / ".env")

    ordered: list[Path] = []
    for candidate in candidates:
        if candidate not in ordered:
            ordered.append(candidate)
    return ordered


def find_dotenv_path(source_path: Optional[Path] = None) -> Optional[Path]:
    """Locate the preferred ``.env`` file for the CLI, if any."""

    for candidate in _candidate_dotenv_paths(source_path or Path(__file__)):
        if candidate.is_file():
            return candidate
    return None


def _load_local_dotenv() -> Optional[Path]:
    env_path = find_dotenv_path()
    if env_path is None:
        return None
    load_dotenv(dotenv_path=env_path, override=False)
    return env_path


def _create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="release-notes",
        description="Search Jira and send release notes to the specified recipients",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML file with default settings",
    )
    parser.add_argument("-H", "--host", dest="host", help="Jira host or base URL")
    parser.add_argument("--jql", dest="jql", help="Jira JQL query")
    parser.add_argument("--type", dest="build_type", help="Build type (QA, RC, etc.)")
    parser.add_argument("-v", "--version", dest="version", help="Build version")
    parser.add_argument("-b", "--build", dest="build", help="Build number")
    parser.add_argument(
        "--recipients",
        dest="recipients",
        help="Path to a file listing one recipient address per line",
    )
    parser.add_argument("--product", dest="product", help="Product name prefixed to the subject")
    parser.add_argument("--sender", dest="sender", help="From address for the email")
    parser.add_argument(
        "--browse-url",
        dest="browse_url",
        help="Base URL for ticket links (defaults to the Jira host)",
    )
    parser.add_argument(
        "--fields",
        dest="fields",
        help="Comma separated Jira fields to request",
    )
    parser.add_argument("--note", dest="note", help="Optional note shown under the heading")
    parser.add_argument(
        "--timezone",
        dest="timezone",
        help="IANA timezone used for the Updated column (defaults to each ticket's offset)",
    )
    parser.add_argument("--jira-user", dest="jira_user", help="Jira username or email")
    parser.add_argument("--jira-token", dest="jira_token", help="Jira API token")
    parser.add_argument(
        "--lenient",
        dest="lenient",
        action="store_true",
        default=None,
        help="Skip issues that fail to decode instead of aborting",
    )
    parser.add_argument(
        "--transport",
        dest="transport",
        choices=TRANSPORTS,
        help="Mail transport (default: sendmail)",
    )
    parser.add_argument(
        "--dry-run",
        dest="dry_run",
        action="store_true",
        default=None,
        help="Print the rendered HTML instead of sending it",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    return parser


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments into a namespace."""

    parser = _create_parser()
    return parser.parse_args(None if argv is None else list(argv))


def main(
    argv: Optional[Iterable[str]] = None,
    *,
    client=None,
    transport=None,
    stdout: TextIO | None = None,
) -> int:
    """Run the release notes command and return a process exit code."""

    _load_local_dotenv()
    args = parse_args(argv)
    configure_logging(args.log_level)
    logger = get_logger(__name__)
    output = stdout or sys.stdout

    try:
        config = build_config(args)
        result = send_release_notes(
            config,
            client=client or build_search_client(config),
            transport=None if config.dry_run else transport or build_transport(config),
        )
    except ReleaseNotesError as exc:
        logger.error(str(exc), extra={"error_type": type(exc).__name__, **exc.context})
        return 1

    if result.outcome is RunOutcome.RENDERED and result.message is not None:
        output.write(result.message.body)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())


__all__ = ["find_dotenv_path", "main", "parse_args"]
