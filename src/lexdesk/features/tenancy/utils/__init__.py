"""Tenancy utilities: template expansion, canonical DDL and admin queries."""
