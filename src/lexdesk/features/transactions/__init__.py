"""Transactions (cash flow) module."""

from .entities.transaction import Transaction
from .models.requests import CreateTransactionRequest, UpdateTransactionRequest
from .repositories.transaction_repository import TransactionRepository

__all__ = [
    "Transaction",
    "CreateTransactionRequest",
    "UpdateTransactionRequest",
    "TransactionRepository",
]
