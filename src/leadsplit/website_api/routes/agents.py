"""Agent administration routes."""

from fastapi import APIRouter, Depends

from ..dependencies import get_agent_service
from ..middleware.auth import verify_secret
from ..schemas.agent import (
    AgentCreateRequest,
    AgentListResponse,
    AgentOut,
    AgentResponse,
    AgentUpdateRequest,
    ErrorResponse,
    MessageResponse,
)
from ..services.agents import AgentService

router = APIRouter(
    prefix="/agents",
    tags=["agents"],
    dependencies=[Depends(verify_secret)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)


@router.post("", status_code=201, response_model=AgentResponse)
def add_agent(payload: AgentCreateRequest, service: AgentService = Depends(get_agent_service)):
    """Create an agent. All fields are required."""
    agent = service.create_agent(
        name=payload.name,
        email=payload.email,
        mobile=payload.mobile,
        password=payload.password,
    )
    return {"message": "Agent created successfully", "agent": agent.to_public_dict()}


@router.get("", response_model=AgentListResponse)
def list_agents(service: AgentService = Depends(get_agent_service)):
    """List agents in creation order."""
    return [agent.to_public_dict() for agent in service.list_agents()]


@router.get("/{agent_id}", response_model=AgentOut, responses={404: {"model": ErrorResponse}})
def get_agent(agent_id: str, service: AgentService = Depends(get_agent_service)):
    return service.get_agent(agent_id).to_public_dict()


@router.put("/{agent_id}", response_model=AgentResponse, responses={404: {"model": ErrorResponse}})
def update_agent(
    agent_id: str,
    payload: AgentUpdateRequest,
    service: AgentService = Depends(get_agent_service),
):
    """Update an agent. Omitted or blank fields keep their current value."""
    agent = service.update_agent(
        agent_id,
        name=payload.name,
        email=payload.email,
        mobile=payload.mobile,
        password=payload.password,
    )
    return {"message": "Agent updated successfully", "agent": agent.to_public_dict()}


@router.delete("/{agent_id}", response_model=MessageResponse, responses={404: {"model": ErrorResponse}})
def delete_agent(agent_id: str, service: AgentService = Depends(get_agent_service)):
    """Delete an agent. Lists already assigned to it are kept."""
    service.delete_agent(agent_id)
    return {"message": "Agent deleted successfully"}
