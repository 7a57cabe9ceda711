"""Tests for the agent directory and list store."""

import sqlite3
from datetime import datetime, timezone

import pytest

from leadsplit.core.distributor import distribute
from leadsplit.core.errors import ConflictError, NotFoundError, StorageError
from leadsplit.core.normalizer import CanonicalRecord
from leadsplit.storage import Database, ListStore
from leadsplit.storage.migrations import run_migrations


class TestMigrations:
    """Tests for the SQL migration runner."""

    def test_migrations_idempotent(self, temp_data_dir):
        path = str(temp_data_dir / "m.db")
        assert run_migrations(path) == 1
        assert run_migrations(path) == 0

    def test_database_applies_schema(self, db):
        with db.connection() as conn:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")}
        assert {"agents", "list_entries", "schema_migrations"} <= tables


class TestAgentDirectory:
    """Tests for AgentDirectory."""

    def test_create_and_get(self, directory):
        agent = directory.create("Asha", "asha@example.com", "555", "hash")

        fetched = directory.get(agent.id)
        assert fetched.name == "Asha"
        assert fetched.email == "asha@example.com"
        assert fetched.password_hash == "hash"
        assert fetched.created_at == agent.created_at

    def test_duplicate_email_rejected(self, directory):
        directory.create("Asha", "asha@example.com", "555", "hash")
        with pytest.raises(ConflictError):
            directory.create("Other", "ASHA@example.com", "556", "hash")

    def test_list_in_creation_order(self, directory, five_agents):
        assert [a.name for a in directory.list()] == ["Alice", "Bruno", "Chen", "Dana", "Eve"]

    def test_first_agents_tie_break_by_id(self, directory):
        same_time = datetime(2024, 1, 1, tzinfo=timezone.utc)
        created = [directory.create(f"A{i}", f"a{i}@example.com", "1", "h", created_at=same_time) for i in range(3)]

        assert [a.id for a in directory.first_agents(3)] == sorted(a.id for a in created)

    def test_first_agents_limit(self, directory, five_agents):
        assert [a.name for a in directory.first_agents(2)] == ["Alice", "Bruno"]

    def test_update_partial(self, directory):
        agent = directory.create("Asha", "asha@example.com", "555", "hash")

        updated = directory.update(agent.id, mobile="999")
        assert updated.name == "Asha"
        assert updated.mobile == "999"
        assert directory.get(agent.id).mobile == "999"

    def test_update_email_conflict(self, directory):
        directory.create("Asha", "asha@example.com", "555", "hash")
        ben = directory.create("Ben", "ben@example.com", "556", "hash")
        with pytest.raises(ConflictError):
            directory.update(ben.id, email="asha@example.com")

    def test_update_missing(self, directory):
        with pytest.raises(NotFoundError):
            directory.update("nope", name="X")

    def test_delete(self, directory):
        agent = directory.create("Asha", "asha@example.com", "555", "hash")
        directory.delete(agent.id)
        assert directory.get(agent.id) is None
        with pytest.raises(NotFoundError):
            directory.delete(agent.id)


class TestListStore:
    """Tests for ListStore."""

    def _records(self, n):
        return [CanonicalRecord(first_name=f"L{i}", phone=str(i), notes="") for i in range(n)]

    def test_append(self, list_store, five_agents):
        entry = list_store.append(five_agents[0].id, "Asha", "555", "vip")
        assert entry.id is not None
        assert list_store.count() == 1

    def test_append_batch(self, list_store, five_agents):
        entries = list_store.append_batch(distribute(self._records(12), five_agents))
        assert len(entries) == 12
        assert list_store.count() == 12

    def test_grouped_by_agent(self, list_store, five_agents):
        list_store.append_batch(distribute(self._records(12), five_agents))

        groups = list_store.grouped_by_agent()
        assert [g.agent.name for g in groups] == ["Alice", "Bruno", "Chen", "Dana", "Eve"]
        assert [g.count for g in groups] == [3, 3, 2, 2, 2]
        assert [e.first_name for e in groups[0].entries] == ["L0", "L1", "L2"]

    def test_batch_rolled_back_on_failure(self, list_store, five_agents, monkeypatch):
        original_insert = ListStore._insert
        calls = {"n": 0}

        def flaky_insert(self, conn, *args):
            calls["n"] += 1
            if calls["n"] == 7:
                raise sqlite3.OperationalError("disk I/O error")
            return original_insert(self, conn, *args)

        monkeypatch.setattr(ListStore, "_insert", flaky_insert)

        with pytest.raises(StorageError, match="no entries were saved"):
            list_store.append_batch(distribute(self._records(12), five_agents))
        assert list_store.count() == 0

    def test_entries_survive_agent_deletion(self, directory, list_store, five_agents):
        list_store.append_batch(distribute(self._records(5), five_agents))
        directory.delete(five_agents[0].id)

        groups = list_store.grouped_by_agent()
        orphaned = [g for g in groups if g.agent is None]
        assert len(orphaned) == 1
        assert orphaned[0].agent_id == five_agents[0].id
        assert list_store.count() == 5

    def test_shared_database_file(self, temp_data_dir):
        path = temp_data_dir / "shared.db"
        Database(path)
        store = ListStore(Database(path))
        assert store.count() == 0
