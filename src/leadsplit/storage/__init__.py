"""Storage layer for agents and their lead lists."""

from .database import Database
from .agents import AgentDirectory
from .lists import ListStore
from .models import Agent, AgentList, ListEntry

__all__ = ["Database", "AgentDirectory", "ListStore", "Agent", "AgentList", "ListEntry"]
