"""Pydantic models for agent administration."""

from typing import List, Optional
from pydantic import BaseModel


class AgentCreateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    password: Optional[str] = None


class AgentUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    mobile: Optional[str] = None
    password: Optional[str] = None


class AgentOut(BaseModel):
    id: str
    name: str
    email: str
    mobile: str
    createdAt: str


class AgentResponse(BaseModel):
    message: str
    agent: AgentOut


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    detail: str
    stage: Optional[str] = None


AgentListResponse = List[AgentOut]
