from __future__ import annotations

import subprocess
import threading
from concurrent.futures import Future, TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Optional, TextIO

import requests

from webapp_harness.entities.discovered_endpoints import DiscoveredEndpoints
from webapp_harness.entities.instance_state import InstanceState
from webapp_harness.frameworks_drivers.config import DevServerConfig
from webapp_harness.frameworks_drivers.log_stream_matcher import LogStreamMatcher
from webapp_harness.frameworks_drivers.port_allocator import PortAllocator, default_port_allocator
from webapp_harness.frameworks_drivers.remote_context import RemoteContext
from webapp_harness.shared.errors import (
    DiscoveryError,
    InstanceStateError,
    ProcessExitError,
    ShutdownDeliveryError,
    ShutdownTimeoutError,
    SpawnError,
    StartupTimeoutError,
)
from webapp_harness.shared.logger import Logger
from webapp_harness.shared.process_checker import ProcessChecker
from webapp_harness.shared.url_utils import join_url

logger = Logger.get(__name__)


class DevAppServerInstance:

    """
    Supervises a single dev_appserver.py child process: spawn, wait until its
    output says it is serving, and shut it down via the admin /quit handler,
    killing it when it does not cooperate.
    """

    def __init__(self, config: DevServerConfig, port_allocator: Optional[PortAllocator] = None,
                 echo_stream: Optional[TextIO] = None):
        self.config = config
        self.host = config.host
        self.startup_timeout = config.startup_timeout
        self.shutdown_grace_period = config.shutdown_grace_period
        self.port, self.api_port = (port_allocator or default_port_allocator).allocate_many(2)

        self.process: subprocess.Popen | None = None
        self.base_url: str | None = None
        self.admin_url: str | None = None
        self.state = InstanceState.CREATED
        self._matcher = LogStreamMatcher(echo_stream=echo_stream)

    def build_command(self) -> list[str]:
        """Build the dev server command line for the allocated ports."""
        app_path = str(Path(self.config.app_path).resolve())
        return [
            *self.config.command,
            f"--port={self.port}",
            f"--api_port={self.api_port}",
            # The admin port is read back from the output, so let the server pick it.
            "--admin_port=0",
            "--automatic_restart=false",
            "--support_datastore_emulator=false",
            "--skip_sdk_update_check=true",
            "--clear_datastore=true",
            "--datastore_consistency_policy=consistent",
            "--clear_search_indexes=true",
            f"-A={self.config.app_id}",
            *self.config.extra_args,
            app_path,
        ]

    def spawn(self) -> None:
        """
        Start the dev server subprocess with stderr piped for discovery.

        Raises:
            SpawnError: If the executable cannot be started.
        """
        if self.state is not InstanceState.CREATED:
            raise InstanceStateError(f"cannot spawn dev server in state {self.state.value}")

        cmd = self.build_command()
        logger.info(f"Starting dev server on port {self.port} (api port {self.api_port})")
        try:
            self.process = subprocess.Popen(cmd, stderr=subprocess.PIPE)
        except OSError as e:
            self.state = InstanceState.FAILED
            raise SpawnError(f"unable to start {cmd[0]}: {e}") from e
        self.state = InstanceState.STARTING

    def _scan_output(self, result: Future) -> None:
        """Background routine: discover the endpoints, then keep echoing output until EOF."""
        stream = self.process.stderr
        try:
            endpoints = self._matcher.scan(stream)
        except Exception as e:
            result.set_exception(e)
        else:
            if endpoints.base_url is not None:
                self.base_url = endpoints.base_url
            if endpoints.admin_url is not None:
                self.admin_url = endpoints.admin_url
            result.set_result(endpoints)
        self._matcher.drain(stream)
        stream.close()

    def await_ready(self) -> None:
        """
        Start the dev server (if needed) and block until its output shows that it is ready.

        Raises:
            SpawnError: If the process cannot be started.
            StartupTimeoutError: If the startup timeout elapsed; the process is killed.
            DiscoveryError: If the output ended or was malformed before the URL was found.
        """
        if self.state is InstanceState.CREATED:
            self.spawn()
        if self.state is not InstanceState.STARTING:
            raise InstanceStateError(f"cannot await readiness in state {self.state.value}")

        result: Future = Future()
        scanner = threading.Thread(
            target=self._scan_output, args=(result,), name=f"devappserver-stderr-{self.port}", daemon=True,
        )
        scanner.start()

        try:
            endpoints: DiscoveredEndpoints = result.result(timeout=self.startup_timeout)
        except FutureTimeoutError:
            logger.error(f"Dev server on port {self.port} not ready after {self.startup_timeout}s")
            self._fail()
            raise StartupTimeoutError("timeout starting child process") from None
        except Exception:
            self._fail()
            raise

        if not endpoints.complete:
            self._fail()
            raise DiscoveryError("unable to find webserver URL")

        self.state = InstanceState.READY
        logger.info(f"Dev server ready at {self.base_url} (admin {self.admin_url})")

    def _fail(self) -> None:
        ProcessChecker.kill_process(self.process)
        self.state = InstanceState.FAILED

    def get_webapp_url(self, path: str) -> str:
        if self.base_url is not None:
            return join_url(self.base_url, path)
        # Local dev server doesn't have HTTPS.
        return join_url(f"http://{self.host}:{self.port}", path)

    def new_context(self) -> RemoteContext:
        """Create a RemoteContext bound to this instance's API port."""
        if self.state is not InstanceState.READY:
            raise InstanceStateError(f"cannot create a remote context in state {self.state.value}")
        return RemoteContext(self.host, self.api_port)

    def close(self) -> None:
        """
        Shut the dev server down: ask the admin server to quit, wait for the process
        for the grace period, and kill it if either step fails.

        Raises:
            ShutdownDeliveryError: If /quit could not be called; the process is killed.
            ShutdownTimeoutError: If the process outlived the grace period; it is killed.
            ProcessExitError: If the process exited with a non-zero status.
        """
        if self.state is InstanceState.CLOSED:
            return
        if self.state is not InstanceState.READY:
            logger.info(f"Closing dev server in state {self.state.value}")
            ProcessChecker.kill_process(self.process)
            self.state = InstanceState.CLOSED
            return

        self.state = InstanceState.CLOSING
        exited: Future = Future()
        waiter = threading.Thread(
            target=lambda: exited.set_result(self.process.wait()), name=f"devappserver-wait-{self.port}", daemon=True,
        )
        waiter.start()

        try:
            # Call the quit handler on the admin server.
            try:
                response = requests.get(join_url(self.admin_url, "/quit"), timeout=self.config.quit_request_timeout)
            except requests.RequestException as e:
                ProcessChecker.kill_process(self.process)
                raise ShutdownDeliveryError(f"unable to call /quit handler: {e}") from e
            response.close()

            try:
                returncode = exited.result(timeout=self.shutdown_grace_period)
            except FutureTimeoutError:
                logger.warning(f"Dev server on port {self.port} still running {self.shutdown_grace_period}s after /quit")
                ProcessChecker.kill_process(self.process)
                raise ShutdownTimeoutError("timeout killing child process") from None

            if returncode != 0:
                raise ProcessExitError(returncode)
        finally:
            ProcessChecker.kill_process(self.process)
            self.state = InstanceState.CLOSED
            logger.info(f"Dev server on port {self.port} closed")
