from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from tripplanner.adapters.api.controllers.routes import router as routes_router
from tripplanner.domain.exceptions import (
    GraphIntegrityError,
    InvalidQuery,
    NetworkNotLoaded,
    SearchBoundExceeded,
    UnknownStop,
)

app = FastAPI(title="TripPlanner")
app.include_router(routes_router)


@app.exception_handler(UnknownStop)
async def unknown_stop_handler(request: Request, exc: UnknownStop) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidQuery)
async def invalid_query_handler(request: Request, exc: InvalidQuery) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(SearchBoundExceeded)
async def search_bound_handler(
    request: Request, exc: SearchBoundExceeded
) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={
            "detail": str(exc),
            "expansions": exc.expansions,
            "found": exc.found,
        },
    )


@app.exception_handler(GraphIntegrityError)
@app.exception_handler(NetworkNotLoaded)
async def network_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.getLogger("uvicorn.error").error(
        "Transit network unavailable: %s", exc, extra={"path": str(request.url.path)}
    )
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Ensure API errors are JSON so clients can display them.

    Starlette's default 500 handler may return plain text/HTML.
    """

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    reveal = (os.getenv("TRIPPLANNER_REVEAL_ERRORS") or "").strip().lower() in {
        "1",
        "true",
        "yes",
        "on",
    }

    if reveal or isinstance(exc, (FileNotFoundError, RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
