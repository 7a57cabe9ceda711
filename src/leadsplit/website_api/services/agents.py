"""Agent administration: input checks and password hashing around the directory."""

import logging
import re
from typing import List, Optional

import bcrypt

from ...core.errors import NotFoundError, ValidationError
from ...storage import Agent, AgentDirectory

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def hash_password(password: str, rounds: int = 12) -> str:
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def _clean_email(value: Optional[str]) -> str:
    email = _clean(value).lower()
    if email and not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")
    return email


class AgentService:
    """Service layer for agent CRUD."""

    def __init__(self, directory: AgentDirectory, bcrypt_rounds: int = 12):
        self.directory = directory
        self.bcrypt_rounds = bcrypt_rounds

    def create_agent(
        self,
        name: Optional[str],
        email: Optional[str],
        mobile: Optional[str],
        password: Optional[str],
    ) -> Agent:
        name, mobile = _clean(name), _clean(mobile)
        if not all([name, _clean(email), mobile, password]):
            raise ValidationError("All fields are required")
        return self.directory.create(
            name=name,
            email=_clean_email(email),
            mobile=mobile,
            password_hash=hash_password(password, self.bcrypt_rounds),
        )

    def list_agents(self) -> List[Agent]:
        return self.directory.list()

    def get_agent(self, agent_id: str) -> Agent:
        agent = self.directory.get(agent_id)
        if agent is None:
            raise NotFoundError("Agent not found")
        return agent

    def update_agent(
        self,
        agent_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        mobile: Optional[str] = None,
        password: Optional[str] = None,
    ) -> Agent:
        """Blank fields keep their current value; a new password is re-hashed."""
        password_hash = hash_password(password, self.bcrypt_rounds) if password else None
        return self.directory.update(
            agent_id,
            name=_clean(name) or None,
            email=_clean_email(email) or None,
            mobile=_clean(mobile) or None,
            password_hash=password_hash,
        )

    def delete_agent(self, agent_id: str):
        self.directory.delete(agent_id)
