"""Admin reset endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

if TYPE_CHECKING:
    from calorie_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.post("/reset/history", dependencies=[Depends(require_admin)])
async def reset_history(request: Request) -> dict[str, bool]:
    """Delete the saved daily history."""
    container: AppContainer = request.app.state.container
    return {"reset": await container.settings_service.reset_history()}


@router.post("/reset/meals", dependencies=[Depends(require_admin)])
async def reset_meals(request: Request) -> dict[str, bool]:
    """Delete the master meal list."""
    container: AppContainer = request.app.state.container
    return {"reset": await container.settings_service.reset_meals()}


@router.post("/reset/all", dependencies=[Depends(require_admin)])
async def reset_all(request: Request) -> dict[str, bool]:
    """Delete every stored key, profile included."""
    container: AppContainer = request.app.state.container
    done = await container.settings_service.reset_all()
    if done:
        container.dashboard_service.state = None
    return {"reset": done}
