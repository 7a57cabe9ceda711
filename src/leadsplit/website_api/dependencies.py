"""Request-scoped access to the services wired up by ``create_app``."""

from fastapi import Request

from ..storage import Database, ListStore
from .services.agents import AgentService
from .services.intake import UploadIntake
from .services.upload import UploadService


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_agent_service(request: Request) -> AgentService:
    return request.app.state.agent_service


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.upload_service


def get_upload_intake(request: Request) -> UploadIntake:
    return request.app.state.upload_intake


def get_list_store(request: Request) -> ListStore:
    return request.app.state.list_store
