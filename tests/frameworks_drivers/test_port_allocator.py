import socket
from unittest.mock import patch

import pytest

from webapp_harness.frameworks_drivers.port_allocator import PortAllocator, default_port_allocator
from webapp_harness.shared.errors import PortAllocationError


class TestPortAllocator:
    """Test cases for PortAllocator."""

    def test_allocate_returns_bindable_port(self, port_allocator):
        """An allocated port can be bound right after allocation."""
        port = port_allocator.allocate()

        assert 0 < port < 65536
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(("localhost", port))

    def test_allocate_many_returns_distinct_ports(self, port_allocator):
        ports = port_allocator.allocate_many(2)

        assert len(ports) == 2
        assert ports[0] != ports[1]

    def test_back_to_back_pairs_never_collide(self):
        """Two instances' worth of ports from the shared allocator are all distinct."""
        first = default_port_allocator.allocate_many(2)
        second = default_port_allocator.allocate_many(2)

        assert len(set(first) | set(second)) == 4

    def test_retries_when_os_hands_back_issued_port(self, port_allocator):
        """A port the OS returns twice is skipped in favour of a fresh one."""
        with patch.object(PortAllocator, '_bind_ephemeral', side_effect=[5000, 5000, 5001]):
            assert port_allocator.allocate() == 5000
            assert port_allocator.allocate() == 5001

    def test_gives_up_after_max_attempts(self):
        allocator = PortAllocator(max_attempts=3)
        with patch.object(PortAllocator, '_bind_ephemeral', return_value=6000):
            allocator.allocate()
            with pytest.raises(PortAllocationError):
                allocator.allocate()

    def test_bind_failure_raises_allocation_error(self, port_allocator):
        with patch.object(PortAllocator, '_bind_ephemeral', side_effect=OSError("address unavailable")):
            with pytest.raises(PortAllocationError, match="address unavailable"):
                port_allocator.allocate()
