from enum import Enum


class InstanceState(str, Enum):
    """Lifecycle states of a supervised dev server instance."""

    CREATED = "created"
    STARTING = "starting"
    READY = "ready"
    FAILED = "failed"
    CLOSING = "closing"
    CLOSED = "closed"
