from __future__ import annotations

import re
import sys
from typing import IO, Optional, TextIO

from pydantic import AnyHttpUrl, TypeAdapter, ValidationError

from webapp_harness.entities.discovered_endpoints import DiscoveredEndpoints
from webapp_harness.shared.errors import DiscoveryError
from webapp_harness.shared.logger import Logger

logger = Logger.get(__name__)

HOST_PATTERN = re.compile(r'module(?: "[^"]+")? running at: (\S+)')
ADMIN_URL_PATTERN = re.compile(r"admin server at: (\S+)")
READY_PATTERN = re.compile(r"GET /_ah/warmup")

_url_adapter = TypeAdapter(AnyHttpUrl)


class LogStreamMatcher:
    """
    Scans dev server diagnostic output for the module URL, the admin URL and the
    warmup request that marks the server as ready.

    Each line read is echoed to `echo_stream` so the operator still sees the
    child's output.
    """

    def __init__(self, echo_stream: Optional[TextIO] = None):
        self.echo_stream = echo_stream if echo_stream is not None else sys.stderr

    @staticmethod
    def _decode(raw: bytes | str) -> str:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="replace")
        return raw.rstrip("\r\n")

    @staticmethod
    def _validate_url(candidate: str) -> str:
        try:
            _url_adapter.validate_python(candidate)
        except ValidationError as e:
            raise DiscoveryError(f"failed to parse URL {candidate!r}: {e}") from e
        return candidate

    def _echo(self, line: str) -> None:
        try:
            self.echo_stream.write(line + "\n")
            self.echo_stream.flush()
        except (OSError, ValueError) as e:
            logger.debug(f"Could not echo dev server output: {e}")

    def match_line(self, line: str, endpoints: DiscoveredEndpoints) -> bool:
        """
        Apply the three rules to a single line, updating `endpoints` in place.

        Returns:
            True once the ready marker has been seen.
        """
        if READY_PATTERN.search(line):
            endpoints.ready = True
            return True

        match = HOST_PATTERN.search(line)
        if match:
            url = self._validate_url(match.group(1))
            if endpoints.base_url is None:
                endpoints.base_url = url
                logger.info(f"Discovered dev server URL {url}")
            else:
                logger.debug(f"Ignoring repeated module URL {url}")

        match = ADMIN_URL_PATTERN.search(line)
        if match:
            url = self._validate_url(match.group(1))
            if endpoints.admin_url is None:
                endpoints.admin_url = url
                logger.info(f"Discovered admin server URL {url}")
            else:
                logger.debug(f"Ignoring repeated admin URL {url}")

        return False

    def scan(self, stream: IO) -> DiscoveredEndpoints:
        """
        Read `stream` until the ready marker or EOF.

        Lines after the ready marker are left unread. Reaching EOF first is not an
        error; the returned endpoints are simply incomplete.

        Raises:
            DiscoveryError: If a captured URL is malformed or reading fails.
        """
        endpoints = DiscoveredEndpoints()
        try:
            for raw in stream:
                line = self._decode(raw)
                self._echo(line)
                if self.match_line(line, endpoints):
                    break
        except (OSError, ValueError) as e:
            raise DiscoveryError(f"error reading dev server stderr: {e}") from e
        return endpoints

    def drain(self, stream: IO) -> None:
        """Echo whatever is left on `stream` until EOF."""
        try:
            for raw in stream:
                self._echo(self._decode(raw))
        except (OSError, ValueError) as e:
            logger.debug(f"Stopped draining dev server output: {e}")
