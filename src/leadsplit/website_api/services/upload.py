"""Upload orchestration: decode, normalize, distribute and persist one file."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union

from ...core.decoder import TabularFormat, iter_rows
from ...core.distributor import AGENT_COUNT, Assignment, distribute, require_agents
from ...core.errors import LeadSplitError
from ...core.normalizer import normalize_rows
from ...storage import AgentDirectory, ListStore

logger = logging.getLogger(__name__)


class UploadStage(Enum):
    """Progress of one upload. Rejection is possible up to DISTRIBUTED."""

    RECEIVED = "received"
    VALIDATED = "validated"
    DECODED = "decoded"
    NORMALIZED = "normalized"
    DISTRIBUTED = "distributed"
    PERSISTED = "persisted"
    ACKNOWLEDGED = "acknowledged"
    REJECTED = "rejected"


@dataclass
class AgentAllocation:
    agent_id: str
    agent_name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"agentId": self.agent_id, "agentName": self.agent_name, "count": self.count}


@dataclass
class DistributionSummary:
    """What an upload did, in agent-selection order."""

    total_records: int
    allocations: List[AgentAllocation] = field(default_factory=list)
    message: str = "File processed and distributed successfully"

    @classmethod
    def from_assignments(cls, assignments: List[Assignment]) -> "DistributionSummary":
        return cls(
            total_records=sum(a.count for a in assignments),
            allocations=[
                AgentAllocation(agent_id=a.agent.id, agent_name=a.agent.name, count=a.count)
                for a in assignments
            ],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "totalRecords": self.total_records,
            "distributedTo": [a.to_dict() for a in self.allocations],
        }


class UploadService:
    """Turn a staged lead file into persisted per-agent lists."""

    def __init__(self, directory: AgentDirectory, list_store: ListStore, agent_count: int = AGENT_COUNT):
        self.directory = directory
        self.list_store = list_store
        self.agent_count = agent_count

    def process_file(self, path: Union[str, Path], fmt: TabularFormat) -> DistributionSummary:
        """Run the whole pipeline for one file.

        Raises a ``LeadSplitError`` tagged with the last stage reached when
        the upload is rejected. Nothing is persisted unless every row
        normalizes.
        """
        stage = UploadStage.RECEIVED
        try:
            agents = self.directory.first_agents(self.agent_count)
            require_agents(agents, self.agent_count)
            stage = UploadStage.VALIDATED

            rows = list(iter_rows(path, fmt))
            stage = UploadStage.DECODED

            records = list(normalize_rows(rows, fmt.label))
            stage = UploadStage.NORMALIZED

            assignments = distribute(records, agents, self.agent_count)
            stage = UploadStage.DISTRIBUTED

            self.list_store.append_batch(assignments)
            stage = UploadStage.PERSISTED
        except LeadSplitError as e:
            if e.stage is None:
                e.stage = stage.value
            logger.warning(f"Upload {UploadStage.REJECTED.value} after {stage.value}: {e.message}")
            raise

        summary = DistributionSummary.from_assignments(assignments)
        logger.info(
            f"Distributed {summary.total_records} records: "
            + ", ".join(f"{a.agent_name}={a.count}" for a in summary.allocations)
        )
        return summary
