"""Request dependencies resolving the objects built at startup"""

from typing import Optional

from fastapi import Request

from tablebook.integrations.callfluent import CallFluentClient
from tablebook.storage.base import ReservationBackend


def get_backend(request: Request) -> ReservationBackend:
    """Active storage backend chosen in the application lifespan"""
    return request.app.state.backend


def get_notifier(request: Request) -> Optional[CallFluentClient]:
    """CallFluent client, or None when it is not configured"""
    return getattr(request.app.state, "notifier", None)
