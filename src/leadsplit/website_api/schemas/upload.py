"""Pydantic models for upload responses."""

from typing import List, Optional
from pydantic import BaseModel


class DistributedTo(BaseModel):
    agentId: str
    agentName: str
    count: int


class UploadResponse(BaseModel):
    message: str
    totalRecords: int
    distributedTo: List[DistributedTo]


class ListAgent(BaseModel):
    id: str
    name: str
    email: str
    mobile: str


class ListItem(BaseModel):
    id: int
    firstName: str
    phone: str
    notes: str


class AgentListGroup(BaseModel):
    agent: Optional[ListAgent] = None
    items: List[ListItem]
