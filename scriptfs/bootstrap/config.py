"""Sandbox configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    return value if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


MARKER_FILE_NAME = "io_test.txt"
DOCUMENTS_SAVE_SUBPATH = "My Games/Into The Breach"
COMPATIBILITY_SAVE_SUBPATH = "../../steamapps/compatdata/590380/pfx"
FALLBACK_SAVE_SUBPATH = "user"

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DESTINATION = "stderr"
DEFAULT_LOG_JSON = True


@dataclass(frozen=True)
class SandboxConfig:
    """Where the two permitted roots live and how the save root is validated.

    ``installation_root`` of None means the process working directory,
    re-read on every call.
    """

    installation_root: Optional[Path] = None
    marker_file_name: str = MARKER_FILE_NAME
    documents_save_subpath: str = DOCUMENTS_SAVE_SUBPATH
    compatibility_save_subpath: str = COMPATIBILITY_SAVE_SUBPATH
    fallback_save_subpath: str = FALLBACK_SAVE_SUBPATH


def config_from_args(args: argparse.Namespace) -> SandboxConfig:
    """Build a SandboxConfig from parsed CLI arguments."""
    installation_root = (
        Path(args.installation_root) if args.installation_root else None
    )
    return SandboxConfig(
        installation_root=installation_root,
        marker_file_name=args.marker_file,
    )


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for sandbox inspection."""
    parser = argparse.ArgumentParser(description="Sandboxed script filesystem")
    parser.add_argument(
        "--installation-root",
        default=_env_str("SCRIPTFS_INSTALLATION_ROOT", None),
        help="Installation root (defaults to the working directory)",
    )
    parser.add_argument(
        "--marker-file",
        default=_env_str("SCRIPTFS_MARKER_FILE", MARKER_FILE_NAME),
        help="File whose presence validates a save data directory",
    )
    parser.add_argument(
        "--caller",
        default="cli",
        help="Name attributed to this invocation in logs",
    )
    default_log_level = (
        _env_str("SCRIPTFS_LOG_LEVEL", DEFAULT_LOG_LEVEL) or DEFAULT_LOG_LEVEL
    ).upper()
    default_destination = _env_str(
        "SCRIPTFS_LOG_DESTINATION", DEFAULT_LOG_DESTINATION
    )
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout, stderr or a file path",
    )
    parser.add_argument(
        "--log-json",
        action=argparse.BooleanOptionalAction,
        default=_env_bool("SCRIPTFS_LOG_JSON", DEFAULT_LOG_JSON),
        help="Emit structured JSON log lines",
    )

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("roots", help="Print the installation and save data roots")
    check = commands.add_parser("check", help="Report whether a path is allowed")
    check.add_argument("path")
    listing = commands.add_parser("ls", help="List a sandboxed directory")
    listing.add_argument("path")
    cat = commands.add_parser("cat", help="Print a sandboxed text file")
    cat.add_argument("path")
    relativize = commands.add_parser(
        "relativize", help="Spell TARGET relative to the directory BASE"
    )
    relativize.add_argument("base")
    relativize.add_argument("target")
    return parser.parse_args(argv)
