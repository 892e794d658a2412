"""Projects module."""

from .entities.project import Project
from .models.requests import CreateProjectRequest, UpdateProjectRequest
from .repositories.project_repository import ProjectRepository

__all__ = ["Project", "CreateProjectRequest", "UpdateProjectRequest", "ProjectRepository"]
