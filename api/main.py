"""
api.main
========

HTTP layer over the Docket workflow engine.

Run with ``uvicorn api.main:app``.  Engine errors are raised by the
handlers untouched and mapped to status codes here, once, so the routers
stay free of ``try`` blocks.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from docket import __version__
from docket.case_store import CaseNotFound
from docket.errors import (
    DeadlineNotFound,
    ExtensionRequestNotFound,
    InvalidTemplate,
    InvalidTransition,
    OutOfRangeInput,
)

from .cases import router as cases_router
from .reference import router as reference_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Docket API",
    version=__version__,
    description="Case stages and statutory deadlines for workplace-harassment investigations.",
)

# --- CORS ----------------------------------------------------------
# Dev-only origins; tighten in production.
origins = [
    "http://localhost:5173",    # Vite dev server default port
    "http://127.0.0.1:5173",
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


# --- Error mapping -------------------------------------------------
def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


@app.exception_handler(InvalidTransition)
def _invalid_transition(request: Request, exc: InvalidTransition):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return _error(409, exc)


@app.exception_handler(InvalidTemplate)
@app.exception_handler(OutOfRangeInput)
def _bad_input(request: Request, exc: Exception):
    logger.warning(f"{request.method} {request.url.path}: {exc}")
    return _error(422, exc)


@app.exception_handler(DeadlineNotFound)
@app.exception_handler(ExtensionRequestNotFound)
def _not_found(request: Request, exc: Exception):
    return _error(404, exc)


@app.exception_handler(CaseNotFound)
def _case_not_found(request: Request, exc: CaseNotFound):
    return JSONResponse(
        status_code=404,
        content={"error": "CaseNotFound", "detail": f"unknown case {exc.args[0]}"},
    )


# --- Include Routers -----------------------------------------------
app.include_router(cases_router)
app.include_router(reference_router)


# ---------- health-check ----------
@app.get("/")
def root():
    return {"status": "ok", "msg": "Docket API is alive", "version": __version__}
