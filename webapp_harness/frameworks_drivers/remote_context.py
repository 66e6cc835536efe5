from __future__ import annotations

from typing import Any, Optional

import httpx

REMOTE_API_PATH = "/_ah/remote_api"


class RemoteContext:
    """
    Request-scoped handle on a dev server's internal API port.

    Lets test code act as the app's backend (for example to seed datastore state)
    without going through the public module URL. Building one does no network I/O.
    """

    def __init__(self, host: str, api_port: int, timeout: float = 30.0, client: Optional[httpx.Client] = None):
        self.host = f"{host}:{api_port}"
        self.base_url = f"http://{self.host}"
        self.client = client or httpx.Client(base_url=self.base_url, timeout=timeout)

    @property
    def remote_api_url(self) -> str:
        return f"{self.base_url}{REMOTE_API_PATH}"

    def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.client.get(path, **kwargs)

    def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return self.client.post(path, **kwargs)

    def call(self, payload: bytes) -> bytes:
        """
        Send a serialized remote API request and return the serialized response.

        Raises:
            httpx.HTTPStatusError: If the API server answers with an error status.
        """
        response = self.client.post(
            self.remote_api_url,
            content=payload,
            headers={"X-Appcfg-Api-Version": "1", "Content-Type": "application/octet-stream"},
        )
        response.raise_for_status()
        return response.content

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "RemoteContext":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
