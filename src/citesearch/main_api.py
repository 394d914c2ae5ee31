"""HTTP boundary: POST /api/search runs one evidence cycle.

Usage:
    uvicorn citesearch.main_api:app
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .errors import (
    CitesearchError, CompletionError, ConfigurationError, EmptyEvidenceError, MalformedRequestError,
)
from .log import setup_logging, get_logger
from .pipeline.run import pipeline
from .schemas.outputs import ErrorResponse

setup_logging()
logger = get_logger("api")

STATUS_BY_ERROR = {
    MalformedRequestError: 400,
    EmptyEvidenceError: 503,
    CompletionError: 502,
    ConfigurationError: 500,
}

app = FastAPI(title="citesearch")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS", "GET"],
    allow_headers=["Content-Type"],
)


def error_response(exc: CitesearchError) -> JSONResponse:
    status = STATUS_BY_ERROR.get(type(exc), 500)
    if isinstance(exc, MalformedRequestError):
        # the specific validation message is the useful part for the caller
        body = ErrorResponse(error=str(exc))
    else:
        body = ErrorResponse(error=exc.user_message, details=exc.details)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


@app.exception_handler(CitesearchError)
async def handle_citesearch_error(request: Request, exc: CitesearchError):
    if isinstance(exc, (CompletionError, ConfigurationError)):
        logger.error(f"{request.url.path} failed: {exc}")
    else:
        logger.warning(f"{request.url.path} rejected: {exc}")
    return error_response(exc)


@app.exception_handler(Exception)
async def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"{request.url.path} crashed: {exc}")
    body = ErrorResponse(error=CitesearchError.user_message, details=str(exc) or type(exc).__name__)
    return JSONResponse(status_code=500, content=body.model_dump(exclude_none=True))


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.post("/api/search")
async def search(request: Request):
    try:
        payload = await request.json()
    except ValueError:
        raise MalformedRequestError("Invalid JSON")

    result = await pipeline.answer_payload(payload)
    return JSONResponse(content=result.model_dump(mode="json", by_alias=True))
