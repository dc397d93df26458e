from fastapi import Request

from mixpoint.services.notifications import NotificationQueue
from mixpoint.services.state_service import SessionStateStore


def get_notifications(request: Request) -> NotificationQueue:
    return request.app.state.notifications


def get_state_store(request: Request) -> SessionStateStore:
    # one store per process: its per-document locks must be shared by every request
    return request.app.state.store
