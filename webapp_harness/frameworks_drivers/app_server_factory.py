from typing import Optional, TextIO

from webapp_harness.frameworks_drivers.config import Config
from webapp_harness.frameworks_drivers.dev_app_server import DevAppServerInstance
from webapp_harness.frameworks_drivers.port_allocator import PortAllocator
from webapp_harness.frameworks_drivers.remote_app_server import RemoteAppServer
from webapp_harness.shared.protocols import AppServerProtocol


class AppServerFactory:
    def __init__(self, config: Config, port_allocator: Optional[PortAllocator] = None,
                 echo_stream: Optional[TextIO] = None):
        self.config = config
        self.port_allocator = port_allocator
        self.echo_stream = echo_stream

    def create_server(self) -> AppServerProtocol:
        if self.config.staging:
            return self._create_remote_server()
        return self._create_dev_server()

    def _create_remote_server(self) -> RemoteAppServer:
        if not self.config.remote_host:
            raise ValueError("remote_host not specified in config")
        return RemoteAppServer(host=self.config.remote_host)

    def _create_dev_server(self) -> DevAppServerInstance:
        return DevAppServerInstance(
            self.config.dev_server, port_allocator=self.port_allocator, echo_stream=self.echo_stream,
        )
