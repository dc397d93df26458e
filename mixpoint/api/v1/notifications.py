from fastapi import APIRouter, Depends

from mixpoint.api.deps import get_notifications
from mixpoint.services.notifications import NotificationQueue

router = APIRouter()


@router.get("")
async def drain_notifications(notifications: NotificationQueue = Depends(get_notifications)) -> dict:
    return {"messages": notifications.drain()}
