import subprocess

from webapp_harness.frameworks_drivers.config import SeedConfig
from webapp_harness.frameworks_drivers.dev_app_server import DevAppServerInstance
from webapp_harness.shared.errors import SeedError
from webapp_harness.shared.logger import Logger

logger = Logger.get(__name__)


class SeedStaticData:
    def __init__(self, config: SeedConfig):
        self.config = config

    def build_command(self, instance: DevAppServerInstance) -> list[str]:
        return [
            *self.config.command,
            f"--local_host={instance.host}:{instance.port}",
            f"--local_remote_api_host={instance.host}:{instance.api_port}",
            *self.config.args,
        ]

    def execute(self, instance: DevAppServerInstance) -> None:
        cmd = self.build_command(instance)
        logger.info(f"Seeding static data into dev server on port {instance.port}")
        try:
            result = subprocess.run(cmd, check=False, timeout=self.config.timeout)
        except OSError as e:
            raise SeedError(f"unable to run {cmd[0]}: {e}") from e
        except subprocess.TimeoutExpired as e:
            raise SeedError(f"seeding did not finish within {self.config.timeout}s") from e

        if result.returncode != 0:
            raise SeedError(f"seeding command exited with status {result.returncode}")
