"""Resolution through the ``parser-util`` helper program.

``parser-util -r <json>`` looks the reference up in the flake registries that
Nix is configured with (``NIX_CONFIG``, ``NIX_USER_CONF_FILES``, the user
registry) and prints a JSON object whose ``resolved_ref`` field describes the
result. This module only runs the process; it never reads that configuration.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Mapping, Optional

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from flake_ref.errors import HelperExitError, HelperTimeoutError, ResolverInvocationError

from .base import FlakeRefResolver

logger = logging.getLogger(__name__)


class ParserUtilResolver(FlakeRefResolver):
    """Resolver backed by a synchronous ``parser-util`` subprocess."""

    def __init__(
        self,
        bin_path: Optional[str] = None,
        timeout: Optional[float] = None,
        env: Optional[Mapping[str, str]] = None,
    ):
        """Initialize the resolver.

        Args:
            bin_path: Helper program; defaults to Constants.PARSER_UTIL_BIN_PATH.
            timeout: Seconds before the helper is killed; defaults to
                Constants.RESOLVE_TIMEOUT.
            env: Environment for the helper; None inherits the caller's.
        """
        self.bin_path = bin_path or Constants.PARSER_UTIL_BIN_PATH
        self.timeout = timeout if timeout is not None else Constants.RESOLVE_TIMEOUT
        self.env = dict(env) if env is not None else None

    def invoke(self, request_json: str) -> str:
        cmd = [self.bin_path, Constants.PARSER_UTIL_RESOLVE_FLAG, request_json]
        if is_debug_enabled(logger):
            logger.debug(
                "Resolver request",
                extra=extra_context(
                    event="subprocess_start",
                    component="parser_util",
                    action="resolve",
                    target=self.bin_path,
                ),
            )

        with Timer() as t:
            try:
                result = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    timeout=self.timeout,
                    env=self.env,
                    check=False,
                )
            except subprocess.TimeoutExpired as exc:
                raise HelperTimeoutError(self.timeout) from exc
            except OSError as exc:
                raise ResolverInvocationError(
                    f"couldn't run resolution helper '{self.bin_path}': {exc}"
                ) from exc

        if is_debug_enabled(logger):
            logger.debug(
                "Resolver response",
                extra=extra_context(
                    event="subprocess_exit",
                    component="parser_util",
                    action="resolve",
                    outcome="success" if result.returncode == 0 else "failure",
                    returncode=result.returncode,
                    duration_ms=t.duration_ms(),
                    target=self.bin_path,
                ),
            )

        if result.returncode != 0:
            raise HelperExitError(result.returncode, result.stderr or "")
        return result.stdout
