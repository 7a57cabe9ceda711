"""Tests for block distribution across agents."""

from types import SimpleNamespace

import pytest

from leadsplit.core.distributor import AGENT_COUNT, allocation_sizes, distribute
from leadsplit.core.errors import PreconditionError
from leadsplit.core.normalizer import CanonicalRecord


def make_records(n):
    return [CanonicalRecord(first_name=f"Lead{i}", phone=str(i)) for i in range(n)]


def make_agents(n):
    return [SimpleNamespace(id=f"agent-{i}", name=chr(ord("A") + i)) for i in range(n)]


class TestAllocationSizes:
    """Sizes are floor(N/5) with the remainder going to the first agents."""

    def test_twelve_records(self):
        assert allocation_sizes(12) == [3, 3, 2, 2, 2]

    def test_exact_multiple(self):
        assert allocation_sizes(10) == [2, 2, 2, 2, 2]

    def test_fewer_records_than_agents(self):
        assert allocation_sizes(3) == [1, 1, 1, 0, 0]

    @pytest.mark.parametrize("total", [1, 4, 5, 6, 9, 11, 24, 99, 1001])
    def test_size_law(self, total):
        sizes = allocation_sizes(total)
        base = total // AGENT_COUNT
        assert sum(sizes) == total
        assert all(size in (base, base + 1) for size in sizes)
        assert sizes == sorted(sizes, reverse=True)
        assert sizes.count(base + 1) == total % AGENT_COUNT
        assert all(size == base + 1 for size in sizes[:total % AGENT_COUNT])


class TestDistribute:
    """Tests for distribute()."""

    def test_twelve_records_five_agents(self):
        agents = make_agents(5)
        assignments = distribute(make_records(12), agents)

        assert [a.agent.name for a in assignments] == ["A", "B", "C", "D", "E"]
        assert [a.count for a in assignments] == [3, 3, 2, 2, 2]

    @pytest.mark.parametrize("total", [1, 7, 12, 25, 53])
    def test_order_preserved(self, total):
        records = make_records(total)
        assignments = distribute(records, make_agents(5))

        rebuilt = [record for a in assignments for record in a.records]
        assert rebuilt == records

    def test_blocks_are_contiguous(self):
        assignments = distribute(make_records(7), make_agents(5))
        assert [r.first_name for r in assignments[0].records] == ["Lead0", "Lead1"]
        assert [r.first_name for r in assignments[1].records] == ["Lead2", "Lead3"]
        assert [r.first_name for r in assignments[4].records] == ["Lead6"]

    def test_fewer_than_five_agents_rejected(self):
        with pytest.raises(PreconditionError, match="Need at least 5 agents"):
            distribute(make_records(12), make_agents(4))

    def test_more_than_five_agents_rejected(self):
        with pytest.raises(PreconditionError, match="Exactly 5 agents"):
            distribute(make_records(12), make_agents(6))

    def test_empty_batch_rejected(self):
        with pytest.raises(PreconditionError, match="No records found"):
            distribute([], make_agents(5))

    def test_deterministic(self):
        records, agents = make_records(23), make_agents(5)
        first = [(a.agent.id, a.records) for a in distribute(records, agents)]
        second = [(a.agent.id, a.records) for a in distribute(records, agents)]
        assert first == second
