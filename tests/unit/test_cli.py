"""Golden unit tests validating CLI parsing behavior."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from scriptfs.bootstrap.config import (
    MARKER_FILE_NAME,
    SandboxConfig,
    config_from_args,
    parse_cli_args,
)

if TYPE_CHECKING:
    from _pytest.monkeypatch import MonkeyPatch


@pytest.fixture(autouse=True)
def clear_environment(monkeypatch: "MonkeyPatch") -> None:
    """Keep ambient SCRIPTFS_* variables out of the defaults."""
    for name in (
        "SCRIPTFS_INSTALLATION_ROOT",
        "SCRIPTFS_MARKER_FILE",
        "SCRIPTFS_LOG_LEVEL",
        "SCRIPTFS_LOG_DESTINATION",
        "SCRIPTFS_LOG_JSON",
    ):
        monkeypatch.delenv(name, raising=False)


def test_parse_cli_args_uses_defaults() -> None:
    """Defaults use the working directory and structured stderr logs."""
    args = parse_cli_args(["roots"])

    assert args.command == "roots"
    assert args.installation_root is None
    assert args.marker_file == MARKER_FILE_NAME
    assert args.caller == "cli"
    assert args.log_level == "INFO"
    assert args.log_destination == "stderr"
    assert args.log_json is True


def test_parse_cli_args_honors_overrides(tmp_path: Path) -> None:
    """Overrides should replace defaults when flags are present."""
    override_dir = tmp_path.as_posix()

    args = parse_cli_args(
        [
            "--installation-root",
            override_dir,
            "--marker-file",
            "marker.txt",
            "--caller",
            "weapon_mod",
            "--log-level",
            "debug",
            "--log-destination",
            "scriptfs.log",
            "--no-log-json",
            "relativize",
            "mods",
            "mods/sub/x.txt",
        ]
    )

    assert args.installation_root == override_dir
    assert args.marker_file == "marker.txt"
    assert args.caller == "weapon_mod"
    assert args.log_level == "DEBUG"
    assert args.log_destination == "scriptfs.log"
    assert args.log_json is False
    assert args.command == "relativize"
    assert args.base == "mods"
    assert args.target == "mods/sub/x.txt"


def test_parse_cli_args_honors_environment(monkeypatch: "MonkeyPatch") -> None:
    """Environment variables should seed defaults."""
    monkeypatch.setenv("SCRIPTFS_LOG_LEVEL", "warning")
    monkeypatch.setenv("SCRIPTFS_LOG_DESTINATION", "app.log")
    monkeypatch.setenv("SCRIPTFS_LOG_JSON", "off")
    monkeypatch.setenv("SCRIPTFS_INSTALLATION_ROOT", "/opt/game")
    monkeypatch.setenv("SCRIPTFS_MARKER_FILE", "marker.txt")

    args = parse_cli_args(["check", "mods/a.lua"])

    assert args.log_level == "WARNING"
    assert args.log_destination == "app.log"
    assert args.log_json is False
    assert args.installation_root == "/opt/game"
    assert args.marker_file == "marker.txt"
    assert args.path == "mods/a.lua"


def test_parse_cli_args_requires_command() -> None:
    """A command is mandatory."""
    with pytest.raises(SystemExit):
        parse_cli_args([])


def test_config_from_args(tmp_path: Path) -> None:
    """Parsed arguments become a SandboxConfig."""
    args = parse_cli_args(
        ["--installation-root", str(tmp_path), "--marker-file", "m.txt", "roots"]
    )

    assert config_from_args(args) == SandboxConfig(
        installation_root=tmp_path, marker_file_name="m.txt"
    )


def test_config_from_args_without_root() -> None:
    """No root means the working directory at call time."""
    assert config_from_args(parse_cli_args(["roots"])).installation_root is None
