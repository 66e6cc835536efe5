from typing import Optional

from pydantic import BaseModel


class DiscoveredEndpoints(BaseModel):
    """Readiness facts extracted from the dev server's diagnostic output."""
    base_url: Optional[str] = None  # Primary module URL, e.g. http://localhost:8080
    admin_url: Optional[str] = None  # Admin server URL used for /quit
    ready: bool = False  # The first /_ah/warmup request has been served

    @property
    def complete(self) -> bool:
        return self.base_url is not None and self.admin_url is not None and self.ready
