"""Agent directory backed by SQLite."""

import logging
import sqlite3
import uuid
from datetime import datetime
from typing import List, Optional

from ..core.errors import ConflictError, NotFoundError
from .database import Database, parse_timestamp
from .models import Agent, utcnow

logger = logging.getLogger(__name__)


def _format_timestamp(value: datetime) -> str:
    return value.isoformat(timespec="microseconds")


class AgentDirectory:
    """Create, look up, update and delete agents.

    Agents are always listed in creation order, ties broken by id.
    """

    def __init__(self, db: Database):
        self.db = db

    def _row_to_agent(self, row: sqlite3.Row) -> Agent:
        return Agent(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            mobile=row["mobile"],
            password_hash=row["password_hash"],
            created_at=parse_timestamp(row["created_at"]),
        )

    def _email_taken(self, conn: sqlite3.Connection, email: str, exclude_id: Optional[str] = None) -> bool:
        query = "SELECT id FROM agents WHERE email = ? COLLATE NOCASE"
        params = [email]
        if exclude_id:
            query += " AND id != ?"
            params.append(exclude_id)
        return conn.execute(query + " LIMIT 1", params).fetchone() is not None

    def create(
        self,
        name: str,
        email: str,
        mobile: str,
        password_hash: str,
        created_at: Optional[datetime] = None,
    ) -> Agent:
        agent = Agent(
            id=uuid.uuid4().hex,
            name=name,
            email=email,
            mobile=mobile,
            password_hash=password_hash,
            created_at=created_at or utcnow(),
        )
        with self.db.connection() as conn:
            if self._email_taken(conn, email):
                raise ConflictError("Agent with this email already exists")
            try:
                conn.execute(
                    """INSERT INTO agents (id, name, email, mobile, password_hash, created_at)
                    VALUES (?, ?, ?, ?, ?, ?)""",
                    (
                        agent.id,
                        agent.name,
                        agent.email,
                        agent.mobile,
                        agent.password_hash,
                        _format_timestamp(agent.created_at),
                    ),
                )
            except sqlite3.IntegrityError:
                raise ConflictError("Agent with this email already exists")

        logger.info(f"Created agent {agent.id} ({agent.email})")
        return agent

    def list(self) -> List[Agent]:
        with self.db.connection() as conn:
            cursor = conn.execute("SELECT * FROM agents ORDER BY created_at ASC, id ASC")
            return [self._row_to_agent(row) for row in cursor.fetchall()]

    def first_agents(self, limit: int) -> List[Agent]:
        """The ``limit`` earliest-created agents."""
        with self.db.connection() as conn:
            cursor = conn.execute(
                "SELECT * FROM agents ORDER BY created_at ASC, id ASC LIMIT ?",
                (limit,),
            )
            return [self._row_to_agent(row) for row in cursor.fetchall()]

    def get(self, agent_id: str) -> Optional[Agent]:
        with self.db.connection() as conn:
            row = conn.execute("SELECT * FROM agents WHERE id = ?", (agent_id,)).fetchone()
            return self._row_to_agent(row) if row else None

    def update(
        self,
        agent_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        mobile: Optional[str] = None,
        password_hash: Optional[str] = None,
    ) -> Agent:
        """Apply the given (non-empty) fields; others keep their current value."""
        with self.db.connection() as conn:
            row = conn.execute("SELECT * FROM agents WHERE id = ?", (agent_id,)).fetchone()
            if not row:
                raise NotFoundError("Agent not found")
            agent = self._row_to_agent(row)

            if email and self._email_taken(conn, email, exclude_id=agent_id):
                raise ConflictError("Agent with this email already exists")

            agent.name = name or agent.name
            agent.email = email or agent.email
            agent.mobile = mobile or agent.mobile
            agent.password_hash = password_hash or agent.password_hash

            try:
                conn.execute(
                    "UPDATE agents SET name = ?, email = ?, mobile = ?, password_hash = ? WHERE id = ?",
                    (agent.name, agent.email, agent.mobile, agent.password_hash, agent_id),
                )
            except sqlite3.IntegrityError:
                raise ConflictError("Agent with this email already exists")

        return agent

    def delete(self, agent_id: str):
        """Remove an agent. Its list entries are left in place."""
        with self.db.connection() as conn:
            cursor = conn.execute("DELETE FROM agents WHERE id = ?", (agent_id,))
            if cursor.rowcount == 0:
                raise NotFoundError("Agent not found")
        logger.info(f"Deleted agent {agent_id}")
