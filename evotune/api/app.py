"""HTTP API — FastAPI routes over the tuner service.

  GET  /current  — candidate parameters under evaluation
  GET  /stable   — best confirmed parameters
  POST /learn    — form field ``score``; returns the full resulting state
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Form, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from evotune import __version__
from evotune.evolution.service import TunerService
from evotune.exceptions import StorageError, ValidationError

_logger = logging.getLogger(__name__)

app = FastAPI(title="evotune", version=__version__)

_service: TunerService | None = None


def configure(service: TunerService | None) -> None:
    global _service
    _service = service


def _not_ready() -> JSONResponse:
    return JSONResponse({"error": "tuner not initialized"}, status_code=503)


@app.exception_handler(ValidationError)
async def _validation_error(request: Request, exc: ValidationError) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=400)


@app.exception_handler(StorageError)
async def _storage_error(request: Request, exc: StorageError) -> JSONResponse:
    _logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc)}, status_code=500)


@app.get("/")
async def index() -> PlainTextResponse:
    return PlainTextResponse("See README for usage.")


@app.get("/current")
async def current():
    if _service is None:
        return _not_ready()
    return await _service.get_current()


@app.get("/stable")
async def stable():
    if _service is None:
        return _not_ready()
    return await _service.get_stable()


@app.post("/learn")
async def learn(score: str | None = Form(None)):
    if _service is None:
        return _not_ready()
    state = await _service.submit_feedback(score)
    return state.to_record()
