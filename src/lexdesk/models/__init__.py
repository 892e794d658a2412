"""Shared pydantic models."""

from .base import BaseSchema, UpdateSchema

__all__ = ["BaseSchema", "UpdateSchema"]
