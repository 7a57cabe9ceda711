"""Persistence for distributed lead lists."""

import logging
import sqlite3
from typing import Dict, Iterable, List, Optional, Tuple

from ..core.distributor import Assignment
from ..core.errors import StorageError
from .database import Database, parse_timestamp
from .models import Agent, AgentList, ListEntry

logger = logging.getLogger(__name__)

_INSERT_ENTRY = """INSERT INTO list_entries (agent_id, first_name, phone, notes, created_at)
    VALUES (?, ?, ?, ?, ?)"""


class ListStore:
    """Append-only store of list entries, each owned by one agent."""

    def __init__(self, db: Database):
        self.db = db

    def _insert(self, conn: sqlite3.Connection, agent_id: str, first_name: str, phone: str, notes: str) -> ListEntry:
        entry = ListEntry(agent_id=agent_id, first_name=first_name, phone=phone, notes=notes or "")
        cursor = conn.execute(
            _INSERT_ENTRY,
            (
                entry.agent_id,
                entry.first_name,
                entry.phone,
                entry.notes,
                entry.created_at.isoformat(timespec="microseconds"),
            ),
        )
        entry.id = cursor.lastrowid
        return entry

    def append(self, agent_id: str, first_name: str, phone: str, notes: str = "") -> ListEntry:
        with self.db.connection() as conn:
            return self._insert(conn, agent_id, first_name, phone, notes)

    def append_batch(self, assignments: Iterable[Assignment]) -> List[ListEntry]:
        """Persist every assigned record in a single transaction.

        Either the whole batch is written or nothing is.
        """
        try:
            with self.db.connection() as conn:
                created = []
                for assignment in assignments:
                    for record in assignment.records:
                        created.append(self._insert(
                            conn,
                            assignment.agent.id,
                            record.first_name,
                            record.phone,
                            record.notes,
                        ))
        except sqlite3.Error as e:
            logger.error(f"List batch rolled back: {e}")
            raise StorageError(f"Failed to save distributed lists; no entries were saved ({e})") from e

        logger.info(f"Saved {len(created)} list entries")
        return created

    def _row_to_entry(self, row: sqlite3.Row) -> ListEntry:
        return ListEntry(
            id=row["id"],
            agent_id=row["agent_id"],
            first_name=row["first_name"],
            phone=row["phone"],
            notes=row["notes"] or "",
            created_at=parse_timestamp(row["created_at"]),
        )

    def list_all(self) -> List[Tuple[ListEntry, Optional[Agent]]]:
        """Every entry with its owning agent joined (None if deleted)."""
        with self.db.connection() as conn:
            cursor = conn.execute("""
                SELECT e.*,
                    a.name AS agent_name, a.email AS agent_email,
                    a.mobile AS agent_mobile, a.created_at AS agent_created_at
                FROM list_entries e
                LEFT JOIN agents a ON a.id = e.agent_id
                ORDER BY e.id ASC
            """)
            results = []
            for row in cursor.fetchall():
                agent = None
                if row["agent_name"] is not None:
                    agent = Agent(
                        id=row["agent_id"],
                        name=row["agent_name"],
                        email=row["agent_email"],
                        mobile=row["agent_mobile"],
                        created_at=parse_timestamp(row["agent_created_at"]),
                    )
                results.append((self._row_to_entry(row), agent))
            return results

    def grouped_by_agent(self) -> List[AgentList]:
        """Entries grouped per owner, groups in order of first appearance."""
        groups: Dict[str, AgentList] = {}
        for entry, agent in self.list_all():
            group = groups.get(entry.agent_id)
            if group is None:
                group = groups[entry.agent_id] = AgentList(agent_id=entry.agent_id, agent=agent)
            group.entries.append(entry)
        return list(groups.values())

    def count(self) -> int:
        with self.db.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM list_entries").fetchone()[0]
