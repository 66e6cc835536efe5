import os
import time
from pathlib import Path

from webapp_harness.frameworks_drivers.app_server_factory import AppServerFactory
from webapp_harness.frameworks_drivers.config import Config
from webapp_harness.shared.logger import Logger
from webapp_harness.use_cases.seed_static_data import SeedStaticData
from webapp_harness.use_cases.start_webserver import StartWebserver

if __name__ == "__main__":
    logger = Logger.get(__name__)

    config_path = os.environ.get("WEBAPP_HARNESS_CONFIG", "config.json")
    config = Config.load(config_path) if Path(config_path).exists() else Config()
    # Override staging mode / remote host if set in environment
    config = config.with_env_overrides(os.environ)

    seeder = SeedStaticData(config.seed) if config.seed.enabled else None
    server = StartWebserver(AppServerFactory(config), seeder).execute()
    logger.info(f"Webapp available at {server.get_webapp_url('/')}")

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Shutting down webapp harness...")
    finally:
        server.close()
