from typing import Protocol, TYPE_CHECKING, runtime_checkable

if TYPE_CHECKING:
    from webapp_harness.frameworks_drivers.remote_context import RemoteContext


@runtime_checkable
class AppServerProtocol(Protocol):
    def close(self) -> None: ...

    def get_webapp_url(self, path: str) -> str: ...


@runtime_checkable
class DevAppServerInstanceProtocol(AppServerProtocol, Protocol):
    def await_ready(self) -> None: ...

    def new_context(self) -> 'RemoteContext': ...
