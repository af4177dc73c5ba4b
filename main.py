"""Command line entry point for inspecting the script filesystem sandbox."""

import logging
import sys

from scriptfs.bootstrap.config import config_from_args, parse_cli_args
from scriptfs.bootstrap.logging_setup import configure_logging
from scriptfs.domain.caller import CallerLoggerAdapter, clear_caller, set_caller
from scriptfs.domain.sandbox import Sandbox
from scriptfs.handlers.commands import run_command

MAIN_LOGGER = CallerLoggerAdapter(logging.getLogger("scriptfs.main"), {})


def main(argv: list[str]) -> int:
    """Parse arguments, build the sandbox and run one command."""
    args = parse_cli_args(argv)
    configure_logging(args.log_level, args.log_destination, args.log_json)
    config = config_from_args(args)
    sandbox = Sandbox(config)

    set_caller(args.caller)
    try:
        MAIN_LOGGER.debug(
            "Running command",
            extra={
                "event": "command_started",
                "command": args.command,
                "installation_root": sandbox.installation_root().as_posix(),
            },
        )
        return run_command(sandbox, args, sys.stdout)
    finally:
        clear_caller()


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
