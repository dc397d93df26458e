from fastapi import APIRouter
from mixpoint.api.v1 import mixes, notifications, state, tracks

router = APIRouter()
router.include_router(state.router, prefix="/state", tags=["state"])
router.include_router(tracks.router, prefix="/tracks", tags=["tracks"])
router.include_router(mixes.router, tags=["mixes"])
router.include_router(notifications.router, prefix="/notifications", tags=["notifications"])
