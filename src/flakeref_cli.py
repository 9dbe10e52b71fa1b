"""CLI entry point for flakeref."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, List, Optional

from args import parse_args
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes, apply_config
from flake_ref import FlakeRefError, IndirectRef, ResolutionError
from resolver import ParserUtilResolver

logger = logging.getLogger(__name__)


def _setup_logging(args: Any) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file)
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s"
        )
        file_handler.setFormatter(formatter)
        logging.getLogger().addHandler(file_handler)
        logger.info("Logging to file: %s", log_file)


def _apply_cli_overrides(args: Any) -> None:
    """Apply config file, environment, then CLI flags (highest precedence)."""
    apply_config(getattr(args, "CONFIG", None))
    if getattr(args, "PARSER_UTIL", None):
        Constants.PARSER_UTIL_BIN_PATH = args.PARSER_UTIL
    if getattr(args, "TIMEOUT", None) is not None:
        Constants.RESOLVE_TIMEOUT = int(args.TIMEOUT)


def _emit(data: Any) -> None:
    sys.stdout.write(json.dumps(data, indent=2) + "\n")


def run_parse(args: Any) -> int:
    ref = IndirectRef.parse(args.REFERENCE)
    _emit(ref.to_dict())
    return ExitCodes.SUCCESS.value


def run_resolve(args: Any) -> int:
    ref = IndirectRef.parse(args.REFERENCE)
    resolver = ParserUtilResolver()
    if is_debug_enabled(logger):
        logger.debug(
            "Resolving reference",
            extra=extra_context(
                event="function_entry",
                component="cli",
                action="resolve",
                target=str(ref),
            ),
        )
    resolved = ref.resolve(resolver)
    _emit(resolved.to_dict())
    return ExitCodes.SUCCESS.value


def main(argv: Optional[List[str]] = None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    _apply_cli_overrides(args)

    handlers = {"parse": run_parse, "resolve": run_resolve}
    try:
        return handlers[args.action](args)
    except ResolutionError as exc:
        logger.error("%s", exc)
        return ExitCodes.RESOLUTION_ERROR.value
    except FlakeRefError as exc:
        logger.error("%s", exc)
        return ExitCodes.PARSE_ERROR.value


if __name__ == "__main__":
    sys.exit(main())
