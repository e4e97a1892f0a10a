from __future__ import annotations

import asyncio
import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ...api import (
    BookingRequest,
    InvalidateRequest,
    InvalidateResponse,
    serialize_booking_check,
    serialize_snapshot_status,
)
from ...domain import CacheDomain, ConflictCandidate, InvalidCandidateError
from ..conflicts import ConflictEngine, format_conflict_message
from ..context import ServiceContext
from ..refresh import RefreshOrchestrator
from ..runtime import run_runtime

logger = logging.getLogger(__name__)


def create_app(context: ServiceContext) -> FastAPI:
    """Local API used by the chat layer to read cache status, invalidate and check bookings."""

    app = FastAPI(title="Daybook Local API", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    refresher = RefreshOrchestrator(context)
    engine = ConflictEngine(context)

    @app.get("/api/snapshot")
    async def snapshot_status() -> JSONResponse:
        return JSONResponse(serialize_snapshot_status(context.store.read(), stale=context.store.is_stale()))

    @app.post("/api/cache/invalidate")
    async def invalidate_cache(request: InvalidateRequest) -> JSONResponse:
        try:
            domain = CacheDomain.parse(request.domain)
        except ValueError as exc:
            logger.warning("Unknown cache domain requested: %s", request.domain)
            raise HTTPException(status_code=422, detail=f"Unknown cache domain: {request.domain}") from exc
        refreshed = await refresher.invalidate(domain)
        payload = InvalidateResponse(requested=domain.value, refreshed=[item.value for item in refreshed])
        return JSONResponse(payload.model_dump())

    @app.post("/api/bookings/check")
    async def check_booking(request: BookingRequest) -> JSONResponse:
        try:
            candidate = ConflictCandidate.from_payload(request.summary, request.start, request.end, tz=context.tz)
        except InvalidCandidateError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc

        check = engine.validate_scheduling_context(candidate)
        if not check.is_valid:
            return JSONResponse(serialize_booking_check(check))

        report = await engine.check_conflicts(candidate)
        message = format_conflict_message(candidate, report, tz=context.tz) if report.has_conflict else None
        return JSONResponse(serialize_booking_check(check, report, message=message))

    return app


async def serve_api(context: ServiceContext, host: str, port: int, *, with_runtime: bool = True) -> None:
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    app = create_app(context)

    stop = asyncio.Event()
    runtime_task = None
    if with_runtime:
        runtime_task = asyncio.create_task(run_runtime(context, stop_event=stop))
    else:
        context.store.load()
    try:
        await serve(app, config)
    finally:
        stop.set()
        if runtime_task is not None:
            await runtime_task


def run_local_server(
    context: ServiceContext,
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    with_runtime: bool = True,
) -> None:
    asyncio.run(serve_api(context, host, port, with_runtime=with_runtime))
