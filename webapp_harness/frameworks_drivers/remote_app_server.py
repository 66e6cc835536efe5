from dataclasses import dataclass

from webapp_harness.shared.url_utils import join_url


@dataclass(frozen=True)
class RemoteAppServer:
    """An already deployed webapp (e.g. staging); the harness does not own its lifecycle."""

    host: str

    def get_webapp_url(self, path: str) -> str:
        # Remote (staging) server has HTTPS.
        return join_url(f"https://{self.host}", path)

    def close(self) -> None:
        return None
