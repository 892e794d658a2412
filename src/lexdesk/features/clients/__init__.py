"""Clients module."""

from .entities.client import Client
from .models.requests import CreateClientRequest, UpdateClientRequest
from .repositories.client_repository import ClientRepository

__all__ = ["Client", "CreateClientRequest", "UpdateClientRequest", "ClientRepository"]
