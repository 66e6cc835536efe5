from __future__ import annotations

import socket
import threading

from webapp_harness.shared.errors import PortAllocationError
from webapp_harness.shared.logger import Logger

logger = Logger.get(__name__)


class PortAllocator:
    """
    Hands out unused local ports for dev server instances.

    A port is found by binding to port 0 and releasing the socket straight away,
    so it is only free on a best-effort basis until the child binds it. Every port
    handed out is remembered so two allocations in this process never collide.
    """

    def __init__(self, host: str = "localhost", max_attempts: int = 32):
        self.host = host
        self.max_attempts = max_attempts
        self._issued: set[int] = set()
        self._lock = threading.Lock()

    def _bind_ephemeral(self) -> int:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind((self.host, 0))
            return sock.getsockname()[1]

    def allocate(self) -> int:
        """
        Allocate a single unused port.

        Returns:
            A port number not previously returned by this allocator.

        Raises:
            PortAllocationError: If binding fails or no fresh port turned up.
        """
        with self._lock:
            for attempt in range(self.max_attempts):
                try:
                    port = self._bind_ephemeral()
                except OSError as e:
                    raise PortAllocationError(f"unable to bind an ephemeral port on {self.host}: {e}") from e
                if port not in self._issued:
                    self._issued.add(port)
                    return port
                logger.debug(f"Port {port} already issued, retrying (attempt {attempt + 1})")
        raise PortAllocationError(f"no unused port found on {self.host} after {self.max_attempts} attempts")

    def allocate_many(self, count: int) -> list[int]:
        """Allocate `count` distinct ports."""
        return [self.allocate() for _ in range(count)]


default_port_allocator = PortAllocator()
