import asyncio
from typing import Optional

from webapp_harness.frameworks_drivers.app_server_factory import AppServerFactory
from webapp_harness.shared.errors import HarnessError, SeedError
from webapp_harness.shared.logger import Logger
from webapp_harness.shared.protocols import AppServerProtocol, DevAppServerInstanceProtocol
from webapp_harness.use_cases.seed_static_data import SeedStaticData

logger = Logger.get(__name__)


class StartWebserver:
    def __init__(self, factory: AppServerFactory, seeder: Optional[SeedStaticData] = None):
        self.factory = factory
        self.seeder = seeder

    def execute(self) -> AppServerProtocol:
        """
        Create an AppServer and, for a local dev server, wait for it to be ready and
        seed it.

        Returns:
            A ready-to-use AppServer.
        """
        server = self.factory.create_server()
        if not isinstance(server, DevAppServerInstanceProtocol):
            return server

        server.await_ready()
        if self.seeder is not None:
            try:
                self.seeder.execute(server)
            except SeedError:
                try:
                    server.close()
                except HarnessError as close_error:
                    logger.warning(f"Failed to close dev server after seeding error: {close_error}")
                raise
        return server

    async def execute_async(self) -> AppServerProtocol:
        return await asyncio.to_thread(self.execute)
