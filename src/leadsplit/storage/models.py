"""Data models for agents and their assigned lists."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Agent:
    """A recipient of distributed lead lists."""

    id: str
    name: str
    email: str
    mobile: str
    password_hash: str = field(default="", repr=False)
    created_at: datetime = field(default_factory=utcnow)

    def to_public_dict(self) -> Dict[str, Any]:
        """Agent fields safe to return to API callers (no credential hash)."""
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "mobile": self.mobile,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class ListEntry:
    """A persisted lead assigned to one agent."""

    id: Optional[int] = None
    agent_id: str = ""
    first_name: str = ""
    phone: str = ""
    notes: str = ""
    created_at: datetime = field(default_factory=utcnow)

    def to_item_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "firstName": self.first_name,
            "phone": self.phone,
            "notes": self.notes,
        }


@dataclass
class AgentList:
    """Entries grouped under their owning agent.

    ``agent`` is None when the owner has since been deleted.
    """

    agent_id: str
    agent: Optional[Agent] = None
    entries: List[ListEntry] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.entries)
