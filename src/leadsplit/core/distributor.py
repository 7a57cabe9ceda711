"""Split a batch of leads across agents in contiguous, near-equal blocks."""

from dataclasses import dataclass, field
from typing import Any, List, Sequence

from .errors import PreconditionError
from .normalizer import CanonicalRecord

AGENT_COUNT = 5


@dataclass
class Assignment:
    """The block of records handed to one agent."""

    agent: Any
    records: List[CanonicalRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)


def allocation_sizes(total: int, agent_count: int = AGENT_COUNT) -> List[int]:
    """Block sizes per agent; the first ``total % agent_count`` agents get one extra."""
    per_agent, remainder = divmod(total, agent_count)
    return [per_agent + (1 if i < remainder else 0) for i in range(agent_count)]


def require_agents(agents: Sequence[Any], agent_count: int = AGENT_COUNT):
    if len(agents) < agent_count:
        raise PreconditionError(f"Need at least {agent_count} agents to distribute lists")


def distribute(
    records: Sequence[CanonicalRecord],
    agents: Sequence[Any],
    agent_count: int = AGENT_COUNT,
) -> List[Assignment]:
    """Partition ``records`` across the first ``agent_count`` agents, preserving order."""
    require_agents(agents, agent_count)
    if len(agents) != agent_count:
        raise PreconditionError(f"Exactly {agent_count} agents are required, got {len(agents)}")
    if not records:
        raise PreconditionError("No records found in the file")

    assignments = []
    index = 0
    for agent, size in zip(agents, allocation_sizes(len(records), agent_count)):
        assignments.append(Assignment(agent=agent, records=list(records[index:index + size])))
        index += size
    return assignments
