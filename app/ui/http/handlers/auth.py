from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.domain.users.service import CredentialManager
from app.ui.http.middlewares.auth import current_user_id
from app.ui.http.middlewares.di import get_credentials
from app.ui.http.presenters import user_to_dict
from app.ui.http.responses import ok
from app.ui.http.schemas import LoginBody, RegisterBody

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register")
async def register(
    body: RegisterBody,
    credentials: CredentialManager = Depends(get_credentials),
) -> JSONResponse:
    result = await credentials.register(body.to_request())
    return ok(
        "User registered successfully",
        {"user": user_to_dict(result.user), "token": result.token},
        status_code=201,
    )


@router.post("/login")
async def login(
    body: LoginBody,
    credentials: CredentialManager = Depends(get_credentials),
) -> JSONResponse:
    result = await credentials.login(body.to_request())
    return ok("Login successful", {"user": user_to_dict(result.user), "token": result.token})


@router.get("/me")
async def me(
    user_id: str = Depends(current_user_id),
    credentials: CredentialManager = Depends(get_credentials),
) -> JSONResponse:
    user = await credentials.get_profile(user_id)
    return ok("User retrieved successfully", {"user": user_to_dict(user)})
