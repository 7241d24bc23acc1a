"""
Structured events emitted by the filesystem facade.

Events are optional observability: the facade calls an injected sink after
each operation, and nothing in the filesystem depends on a sink being present.
"""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class FilesystemEvent:
    """A completed filesystem operation."""
    operation: str  # "open", "create", "delete", "list", ...
    path: Optional[str] = None  # Caller-facing path
    key: Optional[str] = None  # Resolved object-store key
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()), kw_only=True)
    timestamp: float = field(default_factory=time.time, kw_only=True)
    metadata: Dict[str, Any] = field(default_factory=dict, kw_only=True)

    @property
    def event_type(self) -> str:
        """Get event type for filtering."""
        return f"filesystem.{self.operation}"


class EventSink(Protocol):
    """Protocol for event consumers."""

    def __call__(self, event: FilesystemEvent) -> None:
        ...


class CollectingEventSink:
    """Event sink that keeps every event in memory."""

    def __init__(self) -> None:
        self.events: List[FilesystemEvent] = []

    def __call__(self, event: FilesystemEvent) -> None:
        self.events.append(event)

    def operations(self) -> List[str]:
        return [event.operation for event in self.events]

    def clear(self) -> None:
        self.events.clear()
