"""Invoices module."""

from .entities.invoice import Invoice
from .models.requests import CreateInvoiceRequest, UpdateInvoiceRequest
from .repositories.invoice_repository import InvoiceRepository

__all__ = ["Invoice", "CreateInvoiceRequest", "UpdateInvoiceRequest", "InvoiceRepository"]
