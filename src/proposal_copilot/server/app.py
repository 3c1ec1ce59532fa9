"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the in-process workflow session.
Run with `uvicorn --factory proposal_copilot.server.app:create_app`.
"""

from __future__ import annotations

from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware

from proposal_copilot import __version__
from proposal_copilot.engine.config import SimulationSettings
from proposal_copilot.engine.workflow.controller import InvalidTransition
from proposal_copilot.engine.workflow.events import EntryPoint
from proposal_copilot.server.config import ServerSettings
from proposal_copilot.server.models import SessionView
from proposal_copilot.server.session_runner import SessionRunner


def _parse_entry_point(value: str) -> EntryPoint:
    try:
        return EntryPoint(value)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown entry point '{value}'") from None


def create_app(
    settings: ServerSettings | None = None,
    simulation: SimulationSettings | None = None,
) -> FastAPI:
    settings = settings or ServerSettings()

    app = FastAPI(
        title="Proposal Copilot",
        version=__version__,
        description="REST API over the scripted proposal copilot session.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.state.settings = settings
    runner = SessionRunner(simulation or SimulationSettings())
    app.state.runner = runner

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.get("/api/session", response_model=SessionView)
    def get_session() -> SessionView:
        return runner.view()

    @app.post("/api/session/triggers/{entry_point}", response_model=SessionView)
    async def trigger(entry_point: str, response: Response, wait: bool = False) -> SessionView:
        target = _parse_entry_point(entry_point)
        try:
            if wait:
                await runner.run(target)
            else:
                runner.start(target)
                response.status_code = 202
        except InvalidTransition as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        return runner.view()

    @app.post("/api/session/reset", response_model=SessionView)
    def reset() -> SessionView:
        try:
            runner.reset()
        except RuntimeError as e:
            raise HTTPException(status_code=409, detail=str(e)) from e
        return runner.view()

    return app
