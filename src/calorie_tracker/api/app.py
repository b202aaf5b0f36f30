"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from calorie_tracker.api.admin import router as admin_router
from calorie_tracker.api.models import (
    AlertOut,
    DashboardOut,
    HistoryEntryOut,
    ProfileFormIn,
    ProfileOut,
    SaveDayOut,
)
from calorie_tracker.app_logging import configure_logging
from calorie_tracker.containers import AppContainer
from calorie_tracker.domain.errors import StorageError
from calorie_tracker.domain.meals import Category
from calorie_tracker.services.profiles import form_from_profile


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.container.refresh_task.start()
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/dashboard")
    async def dashboard(request: Request) -> DashboardOut:
        """Return the latest totals, goal progress and category meals."""
        state_container: AppContainer = request.app.state.container
        state = await state_container.dashboard_service.current_state()
        if state is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to fetch meals",
            )
        return DashboardOut.from_state(state)

    @app.post("/dashboard/refresh")
    async def refresh_dashboard(request: Request) -> DashboardOut:
        """Run one refresh cycle immediately."""
        state_container: AppContainer = request.app.state.container
        state = await state_container.dashboard_service.refresh()
        if state is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to fetch meals",
            )
        return DashboardOut.from_state(state)

    @app.post("/day/save")
    async def save_day(request: Request) -> SaveDayOut:
        """Snapshot today's totals into the history and clear all categories."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.dashboard_service.save_day()
        return SaveDayOut(
            saved=result.saved,
            entry=HistoryEntryOut.from_entry(result.entry) if result.entry else None,
            reset_failed=result.reset_failed,
        )

    @app.delete("/categories/{category}")
    async def clear_category(category: str, request: Request) -> dict[str, object]:
        """Remove every meal logged under one category."""
        state_container: AppContainer = request.app.state.container
        try:
            resolved = Category(category)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown category: {category}",
            ) from None
        cleared = await state_container.dashboard_service.clear_category(resolved)
        return {"category": resolved.value, "cleared": cleared}

    @app.get("/history")
    async def history(request: Request) -> dict[str, list[HistoryEntryOut]]:
        """Return saved daily snapshots in stored order."""
        state_container: AppContainer = request.app.state.container
        try:
            entries = await state_container.reconciler.list_history()
        except StorageError:
            logger.exception("Failed to load history")
            state_container.alert_feed.alert("Error", "Failed to load history")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to load history",
            ) from None
        return {"history": [HistoryEntryOut.from_entry(entry) for entry in entries]}

    @app.get("/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the stored profile, or null before onboarding, with form text."""
        state_container: AppContainer = request.app.state.container
        profile = await state_container.settings_service.load_profile()
        return {
            "profile": ProfileOut.from_profile(profile) if profile else None,
            "form": ProfileFormIn.from_form(form_from_profile(profile)),
        }

    @app.put("/profile")
    async def save_profile(form: ProfileFormIn, request: Request) -> ProfileOut:
        """Filter, parse and persist the settings form."""
        state_container: AppContainer = request.app.state.container
        profile = await state_container.settings_service.save_profile(form.to_form())
        if profile is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Failed to save data",
            )
        return ProfileOut.from_profile(profile)

    @app.get("/alerts")
    async def alerts(request: Request) -> dict[str, list[AlertOut]]:
        """Return and clear pending user-facing alerts."""
        state_container: AppContainer = request.app.state.container
        drained = state_container.alert_feed.drain()
        return {
            "alerts": [
                AlertOut(
                    title=alert.title, message=alert.message, raised_at=alert.raised_at
                )
                for alert in drained
            ]
        }

    return app
