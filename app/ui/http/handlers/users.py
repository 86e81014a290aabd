from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.domain.tasks.stats import StatsAggregator
from app.domain.users.service import CredentialManager
from app.ui.http.middlewares.auth import current_user_id
from app.ui.http.middlewares.di import get_credentials, get_stats
from app.ui.http.presenters import stats_to_dict, user_to_dict
from app.ui.http.responses import ok
from app.ui.http.schemas import ProfileBody

# every route here is protected
router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(current_user_id)])


@router.get("/profile")
async def get_profile(
    user_id: str = Depends(current_user_id),
    credentials: CredentialManager = Depends(get_credentials),
) -> JSONResponse:
    user = await credentials.get_profile(user_id)
    return ok("Profile retrieved", {"user": user_to_dict(user)})


@router.put("/profile")
async def update_profile(
    body: ProfileBody,
    user_id: str = Depends(current_user_id),
    credentials: CredentialManager = Depends(get_credentials),
) -> JSONResponse:
    user = await credentials.update_profile(user_id, body.to_patch())
    return ok("Profile updated successfully", {"user": user_to_dict(user)})


@router.delete("/account")
async def delete_account(
    user_id: str = Depends(current_user_id),
    credentials: CredentialManager = Depends(get_credentials),
) -> JSONResponse:
    await credentials.delete_account(user_id)
    return ok("Account deleted successfully")


@router.get("/activity-stats")
async def activity_stats(
    user_id: str = Depends(current_user_id),
    stats: StatsAggregator = Depends(get_stats),
) -> JSONResponse:
    result = await stats.compute(user_id)
    return ok("Activity stats retrieved", stats_to_dict(result))
