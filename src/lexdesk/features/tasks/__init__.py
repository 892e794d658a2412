"""Tasks module."""

from .entities.task import Task
from .models.requests import CreateTaskRequest, UpdateTaskRequest
from .repositories.task_repository import TaskRepository

__all__ = ["Task", "CreateTaskRequest", "UpdateTaskRequest", "TaskRepository"]
