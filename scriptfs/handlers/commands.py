"""Inspection commands exposed through the command line."""

import argparse
import logging
from typing import Callable, TextIO

from scriptfs.domain.caller import CallerLoggerAdapter
from scriptfs.domain.errors import SandboxError
from scriptfs.domain.sandbox import Sandbox

COMMAND_LOGGER = CallerLoggerAdapter(
    logging.getLogger("scriptfs.handlers.commands"), {}
)


def roots_command(sandbox: Sandbox, _args: argparse.Namespace, out: TextIO) -> int:
    """Print both roots; a missing save data root is reported, not fatal."""
    out.write(f"installation\t{sandbox.installation_directory().path}\n")
    try:
        save_data = sandbox.save_data_directory().path
    except SandboxError as error:
        COMMAND_LOGGER.warning(
            "Save data root unavailable",
            extra={
                "event": "save_data_root_unavailable",
                "error_type": type(error).__name__,
            },
        )
        save_data = "-"
    out.write(f"save_data\t{save_data}\n")
    return 0


def check_command(sandbox: Sandbox, args: argparse.Namespace, out: TextIO) -> int:
    target = sandbox.path_filter.absolutize(args.path)
    allowed = sandbox.is_whitelisted(target)
    out.write(f"{'allowed' if allowed else 'denied'}\t{target.as_posix()}\n")
    return 0 if allowed else 1


def ls_command(sandbox: Sandbox, args: argparse.Namespace, out: TextIO) -> int:
    directory = sandbox.directory(args.path)
    for child in directory.directories():
        out.write(f"{child.relative_path()}\n")
    for child in directory.files():
        out.write(f"{child.relative_path()}\n")
    return 0


def cat_command(sandbox: Sandbox, args: argparse.Namespace, out: TextIO) -> int:
    out.write(sandbox.file(args.path).read_to_string())
    return 0


def relativize_command(sandbox: Sandbox, args: argparse.Namespace, out: TextIO) -> int:
    relative = sandbox.directory(args.base).relativize(args.target)
    if relative is None:
        out.write("-\n")
        return 1
    out.write(f"{relative}\n")
    return 0


COMMANDS: dict[str, Callable[[Sandbox, argparse.Namespace, TextIO], int]] = {
    "roots": roots_command,
    "check": check_command,
    "ls": ls_command,
    "cat": cat_command,
    "relativize": relativize_command,
}


def run_command(sandbox: Sandbox, args: argparse.Namespace, out: TextIO) -> int:
    """Dispatch ``args.command``; sandbox and OS errors map to exit code 1."""
    handler = COMMANDS[args.command]
    try:
        return handler(sandbox, args, out)
    except (SandboxError, OSError) as error:
        COMMAND_LOGGER.error(
            str(error),
            extra={
                "event": "command_failed",
                "command": args.command,
                "error_type": type(error).__name__,
            },
        )
        return 1
