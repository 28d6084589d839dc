"""FastAPI application entry point."""

from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import router as api_router
from app.core.errors import WriteFlowError
from app.core.logging import get_logger

VERSION = "0.1.0"

logger = get_logger(__name__)

app = FastAPI(
    title="WriteFlow Engine",
    description="Reading notes, idea cards and content generation for a personal library",
    version=VERSION,
)


@app.exception_handler(WriteFlowError)
async def writeflow_error_handler(request: Request, exc: WriteFlowError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(content={"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(content={"error": str(exc.detail)}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies and missing parameters are client errors, reported as 400."""
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ())[1:])
        problems.append(f"{field}: {err.get('msg')}" if field else str(err.get("msg")))
    return JSONResponse(content={"error": "; ".join(problems) or "Invalid request"}, status_code=400)


@app.get("/health")
@app.get("/api/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(
        content={
            "status": "ok",
            "version": VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
        status_code=200,
    )


app.include_router(api_router, prefix="/api")
