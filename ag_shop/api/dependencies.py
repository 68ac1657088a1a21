"""Dependency injection for FastAPI endpoints"""

from datetime import date
from fastapi import Request
from ag_shop.infrastructure.clients.change_webhook import ChangeNotifier, change_notifier


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_today() -> date:
    """Evaluation date for interest on purchases that are still accruing"""
    return date.today()


def get_change_notifier() -> ChangeNotifier:
    """Provide the process-wide change notifier"""
    return change_notifier
