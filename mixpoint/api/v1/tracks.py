from fastapi import APIRouter, Depends, HTTPException, Response, status

from mixpoint.api.deps import get_notifications
from mixpoint.core import Database, get_db
from mixpoint.schemas.track import TrackRecord
from mixpoint.services.notifications import NotificationQueue
from mixpoint.services.track_service import TrackService

router = APIRouter()


@router.post("", response_model=TrackRecord, response_model_by_alias=True)
async def put_track(
    candidate: TrackRecord,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
):
    svc = TrackService(db.sessions, notifications)
    track = await svc.put_track(candidate)
    if track is None:
        raise HTTPException(status_code=503, detail="track not stored")
    return track


@router.get("/{track_id}", response_model=TrackRecord, response_model_by_alias=True)
async def get_track(
    track_id: int,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
):
    svc = TrackService(db.sessions, notifications)
    track = await svc.get_track(track_id)
    if track is None:
        raise HTTPException(status_code=404, detail="track not found")
    return track


@router.delete("/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_track(
    track_id: int,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
) -> Response:
    svc = TrackService(db.sessions, notifications)
    if await svc.remove_track(track_id) is None:
        raise HTTPException(status_code=503, detail="track not removed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
