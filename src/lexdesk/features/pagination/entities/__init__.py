"""Pagination entities."""
