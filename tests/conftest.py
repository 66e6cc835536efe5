"""
Test configuration and fixtures for webapp harness tests.
"""
import io
import json
import shutil
import sys
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from webapp_harness.frameworks_drivers.config import DevServerConfig
from webapp_harness.frameworks_drivers.port_allocator import PortAllocator

FAKE_DEVSERVER = Path(__file__).parent / "shared" / "fake_devserver.py"


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path)


@pytest.fixture
def sample_config_data():
    """Sample configuration data for testing."""
    return {
        "staging": False,
        "remote_host": "staging.example.test",
        "dev_server": {
            "command": ["dev_appserver.py"],
            "app_path": "../webapp",
            "app_id": "testapp",
            "startup_timeout": 30,
            "shutdown_grace_period": 5,
        },
        "seed": {
            "enabled": True,
            "command": ["seed-data"],
            "args": ["--static_runs=true"],
        },
    }


@pytest.fixture
def config_file(temp_dir, sample_config_data):
    """Create a temporary config file."""
    config_path = temp_dir / "config.json"
    with open(config_path, 'w') as f:
        json.dump(sample_config_data, f, indent=2)
    return str(config_path)


@pytest.fixture
def echo_stream():
    """Captures the dev server output echoed by the harness."""
    return io.StringIO()


@pytest.fixture
def port_allocator():
    return PortAllocator()


@pytest.fixture
def fake_devserver_config(temp_dir):
    """Build a DevServerConfig that runs the fake dev server in the given mode."""
    def _build(mode: str = "normal", **overrides) -> DevServerConfig:
        values = {
            "command": [sys.executable, str(FAKE_DEVSERVER), f"--mode={mode}"],
            "app_path": str(temp_dir),
            "startup_timeout": 30.0,
            "shutdown_grace_period": 10.0,
        }
        values.update(overrides)
        return DevServerConfig(**values)

    return _build


@pytest.fixture
def mock_process():
    """A Popen stand-in whose stderr is fed from a byte string."""
    def _build(stderr_output: bytes = b"", returncode: int = 0) -> MagicMock:
        process = MagicMock()
        process.pid = 4242
        process.stderr = io.BytesIO(stderr_output)
        process.poll.return_value = None
        process.wait.return_value = returncode
        return process

    return _build


READY_OUTPUT = (
    b"INFO     Starting API server at: http://localhost:9998\n"
    b"INFO     Starting module \"default\" running at: http://localhost:8080\n"
    b"INFO     Starting admin server at: http://localhost:9999\n"
    b"INFO     default: \"GET /_ah/warmup HTTP/1.1\" 200 2\n"
)


@pytest.fixture
def ready_output():
    return READY_OUTPUT
