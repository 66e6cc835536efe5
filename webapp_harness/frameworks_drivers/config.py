import json
from pathlib import Path
from typing import List, Mapping

from pydantic import BaseModel, Field

TRUTHY_VALUES = {"1", "true", "yes", "on"}


class DevServerConfig(BaseModel):
    """Configuration for a locally spawned dev server.

    Attributes:
        command: Executable (and leading arguments) used to start the dev server.
        app_path: Path of the application directory passed to the dev server.
        app_id: Application id passed with -A.
        host: Host the dev server binds to.
        startup_timeout: Seconds to wait for the server to become ready.
        shutdown_grace_period: Seconds to wait for exit after /quit was delivered.
        quit_request_timeout: Timeout for the /quit request itself.
        extra_args: Additional arguments appended before the application path.
    """

    command: List[str] = Field(default_factory=lambda: ["dev_appserver.py"], description="Executable (and leading arguments) used to start the dev server")
    app_path: str = Field("../webapp", description="Path of the application directory passed to the dev server")
    app_id: str = Field("wptdashboard", description="Application id passed with -A")
    host: str = Field("localhost", description="Host the dev server binds to")
    startup_timeout: float = Field(90.0, gt=0, description="Seconds to wait for the server to become ready")
    shutdown_grace_period: float = Field(15.0, gt=0, description="Seconds to wait for exit after /quit was delivered")
    quit_request_timeout: float = Field(5.0, gt=0, description="Timeout for the /quit request itself")
    extra_args: List[str] = Field(default_factory=list, description="Additional arguments appended before the application path")


class SeedConfig(BaseModel):
    """Configuration for seeding a freshly started dev server with static data.

    Attributes:
        enabled: Whether seeding runs after the server is ready.
        command: Seeding command; the host flags are appended to it.
        args: Arguments appended after the host flags.
        timeout: Seconds the seeding command may run.
    """

    enabled: bool = Field(False, description="Whether seeding runs after the server is ready")
    command: List[str] = Field(default_factory=lambda: ["go", "run", "../util/populate_dev_data.go"], description="Seeding command; the host flags are appended to it")
    args: List[str] = Field(default_factory=lambda: ["--remote_runs=false", "--static_runs=true"], description="Arguments appended after the host flags")
    timeout: float = Field(600.0, gt=0, description="Seconds the seeding command may run")


class Config(BaseModel):
    """Main harness configuration.

    Attributes:
        staging: Use the deployed staging instance instead of a local dev server.
        remote_host: Host of the staging webapp.
        dev_server: Configuration for the local dev server.
        seed: Static data seeding configuration.
    """

    staging: bool = Field(False, description="Use the deployed staging instance instead of a local dev server")
    remote_host: str = Field("staging.wpt.fyi", description="Host of the staging webapp")
    dev_server: DevServerConfig = Field(default_factory=DevServerConfig)
    seed: SeedConfig = Field(default_factory=SeedConfig)

    def with_env_overrides(self, environ: Mapping[str, str]) -> "Config":
        """Return a copy with WEBAPP_HARNESS_STAGING / WEBAPP_HARNESS_REMOTE_HOST applied."""
        update = {}
        if "WEBAPP_HARNESS_STAGING" in environ:
            update["staging"] = environ["WEBAPP_HARNESS_STAGING"].strip().lower() in TRUTHY_VALUES
        if environ.get("WEBAPP_HARNESS_REMOTE_HOST"):
            update["remote_host"] = environ["WEBAPP_HARNESS_REMOTE_HOST"]
        return self.model_copy(update=update)

    @classmethod
    def load(cls, config_path: str = "config.json") -> "Config":
        """Load and validate configuration from JSON file."""
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(path) as f:
            data = json.load(f)

        return cls(**data)
