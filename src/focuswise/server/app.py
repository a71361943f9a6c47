"""FastAPI HTTP front end for the focus-mode widget.

Exposes the widget's lifecycle operations, its live snapshot, a JPEG
preview of the latest camera frame, and the report history. A browser
dashboard polls these routes to draw the overlay and modal views.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from focuswise.archive.store import ArchiveError
from focuswise.domain.models import FocusReport, SessionSnapshot
from focuswise.session.state import (
    ConfigurationError,
    FocusSessionError,
    InvalidDurationError,
)
from focuswise.session.widget import FocusModeWidget
from focuswise.utils.imaging import encode_jpeg

logger = logging.getLogger(__name__)


class StartRequest(BaseModel):
    minutes: int | str = Field(description="Preset or custom session length in minutes")


class OverlayRequest(BaseModel):
    minimized: bool | None = Field(
        default=None, description="Desired overlay mode; omit to toggle"
    )


class SessionView(BaseModel):
    session: SessionSnapshot
    preset_minutes: list[int]
    last_report: FocusReport | None = None


class EndResponse(BaseModel):
    report: FocusReport | None
    warning: str | None = None


class HealthStatus(BaseModel):
    status: str = "ok"
    state: str
    classifier_loaded: bool


def _status_for(exc: FocusSessionError) -> int:
    if isinstance(exc, InvalidDurationError):
        return 422
    if isinstance(exc, ConfigurationError):
        return 503
    return 409


def create_app(widget: FocusModeWidget | None = None, settings=None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        widget: Widget to serve. If None, one is built from settings.
        settings: Settings used to build the widget when none is given.
    """
    if widget is None:
        from focuswise.bootstrap import build_widget
        from focuswise.config.settings import Settings

        widget = build_widget(settings or Settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Focus server started")
        yield
        await app.state.widget.teardown()
        logger.info("Focus server stopped")

    app = FastAPI(
        title="focuswise",
        description="Focus-mode session API for the CareerWise dashboard",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.widget = widget

    @app.exception_handler(FocusSessionError)
    async def session_error_handler(request: Request, exc: FocusSessionError) -> JSONResponse:
        return JSONResponse(status_code=_status_for(exc), content={"detail": str(exc)})

    @app.exception_handler(ArchiveError)
    async def archive_error_handler(request: Request, exc: ArchiveError) -> JSONResponse:
        logger.error("Report archive error: %s", exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    def _view() -> SessionView:
        w: FocusModeWidget = app.state.widget
        return SessionView(
            session=w.snapshot(),
            preset_minutes=w.preset_minutes,
            last_report=w.last_report,
        )

    @app.get("/health")
    async def health_check() -> HealthStatus:
        snapshot = app.state.widget.snapshot()
        return HealthStatus(
            state=snapshot.state.value,
            classifier_loaded=snapshot.classifier_loaded,
        )

    @app.get("/session")
    async def get_session() -> SessionView:
        return _view()

    @app.post("/session/open")
    async def open_session() -> SessionView:
        await app.state.widget.open()
        return _view()

    @app.post("/session/start")
    async def start_session(request: StartRequest) -> SessionView:
        await app.state.widget.start_minutes(request.minutes)
        return _view()

    @app.post("/session/end")
    async def end_session() -> EndResponse:
        w: FocusModeWidget = app.state.widget
        report = await w.end()
        return EndResponse(report=report, warning=w.snapshot().warning)

    @app.post("/session/new")
    async def new_session() -> SessionView:
        await app.state.widget.new_session()
        return _view()

    @app.post("/session/dismiss")
    async def dismiss_session() -> SessionView:
        await app.state.widget.dismiss()
        return _view()

    @app.post("/session/overlay")
    async def set_overlay(request: OverlayRequest) -> SessionView:
        w: FocusModeWidget = app.state.widget
        if request.minimized is None or request.minimized != w.snapshot().minimized:
            w.toggle_minimized()
        return _view()

    @app.get("/session/preview")
    async def get_preview() -> Response:
        frame = app.state.widget.latest_frame
        if frame is None:
            raise HTTPException(status_code=404, detail="No live preview")
        return Response(content=encode_jpeg(frame.image), media_type="image/jpeg")

    @app.get("/reports")
    async def list_reports() -> list[FocusReport]:
        return app.state.widget.archive.list()

    @app.delete("/reports", status_code=204)
    async def clear_reports(confirm: bool = False) -> Response:
        if not confirm:
            raise HTTPException(
                status_code=400,
                detail="Clearing focus reports cannot be undone; repeat with confirm=true",
            )
        app.state.widget.archive.clear_all()
        return Response(status_code=204)

    return app


def main() -> None:
    """Entry point for running the focus server standalone."""
    from focuswise.config.settings import load_settings
    from focuswise.utils.logging import setup_logging

    settings = load_settings()
    setup_logging(settings.logging)
    app = create_app(settings=settings)
    uvicorn.run(app, host=settings.server.host, port=settings.server.port)


if __name__ == "__main__":
    main()
