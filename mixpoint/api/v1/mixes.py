from fastapi import APIRouter, Depends, HTTPException, Response, status

from mixpoint.api.deps import get_notifications
from mixpoint.core import Database, get_db
from mixpoint.schemas.mix import MixIn, MixOut, SetIn, SetOut
from mixpoint.services.mix_service import MixService
from mixpoint.services.notifications import NotificationQueue

router = APIRouter()


def _svc(db: Database, notifications: NotificationQueue) -> MixService:
    return MixService(db.sessions, notifications)


@router.post("/mixes", response_model=MixOut, response_model_by_alias=True)
async def add_mix(
    body: MixIn,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
):
    svc = _svc(db, notifications)
    mix_id = await svc.add_mix(body.track_ids, body.mix_points)
    if mix_id is None:
        raise HTTPException(status_code=503, detail="mix not stored")
    return MixOut(id=mix_id, track_ids=body.track_ids, mix_points=body.mix_points)


@router.get("/mixes/{mix_id}", response_model=MixOut, response_model_by_alias=True)
async def get_mix(
    mix_id: int,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
):
    mix = await _svc(db, notifications).get_mix(mix_id)
    if mix is None:
        raise HTTPException(status_code=404, detail="mix not found")
    return mix


@router.delete("/mixes/{mix_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_mix(
    mix_id: int,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
) -> Response:
    if await _svc(db, notifications).remove_mix(mix_id) is None:
        raise HTTPException(status_code=503, detail="mix not removed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/sets", response_model=SetOut, response_model_by_alias=True)
async def add_set(
    body: SetIn,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
):
    set_id = await _svc(db, notifications).add_set(body.mix_ids)
    if set_id is None:
        raise HTTPException(status_code=503, detail="set not stored")
    return SetOut(id=set_id, mix_ids=body.mix_ids)


@router.get("/sets/{set_id}", response_model=SetOut, response_model_by_alias=True)
async def get_set(
    set_id: int,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
):
    mix_set = await _svc(db, notifications).get_set(set_id)
    if mix_set is None:
        raise HTTPException(status_code=404, detail="set not found")
    return mix_set


@router.delete("/sets/{set_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_set(
    set_id: int,
    db: Database = Depends(get_db),
    notifications: NotificationQueue = Depends(get_notifications),
) -> Response:
    if await _svc(db, notifications).remove_set(set_id) is None:
        raise HTTPException(status_code=503, detail="set not removed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
