import subprocess
from unittest.mock import MagicMock, patch

import pytest

from webapp_harness.frameworks_drivers.config import SeedConfig
from webapp_harness.shared.errors import SeedError
from webapp_harness.use_cases.seed_static_data import SeedStaticData

SUBPROCESS_RUN = 'webapp_harness.use_cases.seed_static_data.subprocess.run'


class TestSeedStaticData:
    @pytest.fixture
    def instance(self):
        instance = MagicMock()
        instance.host = "localhost"
        instance.port = 8080
        instance.api_port = 9001
        return instance

    @pytest.fixture
    def use_case(self):
        return SeedStaticData(SeedConfig(command=["seed-data"], args=["--static_runs=true"], timeout=30))

    def test_build_command(self, use_case, instance):
        assert use_case.build_command(instance) == [
            "seed-data",
            "--local_host=localhost:8080",
            "--local_remote_api_host=localhost:9001",
            "--static_runs=true",
        ]

    def test_execute_success(self, use_case, instance):
        with patch(SUBPROCESS_RUN) as mock_run:
            mock_run.return_value.returncode = 0
            use_case.execute(instance)

        mock_run.assert_called_once_with(use_case.build_command(instance), check=False, timeout=30)

    def test_execute_nonzero_exit(self, use_case, instance):
        with patch(SUBPROCESS_RUN) as mock_run:
            mock_run.return_value.returncode = 1
            with pytest.raises(SeedError, match="status 1"):
                use_case.execute(instance)

    def test_execute_missing_command(self, use_case, instance):
        with patch(SUBPROCESS_RUN, side_effect=FileNotFoundError("seed-data")):
            with pytest.raises(SeedError, match="unable to run seed-data"):
                use_case.execute(instance)

    def test_execute_timeout(self, use_case, instance):
        with patch(SUBPROCESS_RUN, side_effect=subprocess.TimeoutExpired("seed-data", 30)):
            with pytest.raises(SeedError, match="did not finish"):
                use_case.execute(instance)
