import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.endpoints import router
from app.core.config import settings
from app.core.tracing import instrument_app, instrument_httpx, setup_tracing, shutdown_tracing
from app.shared.correlation import CorrelationMiddleware
from app.shared.errors import get_correlation_id, internal_error, validation_error
from app.shared.logging_config import setup_logging

# Configure logging
setup_logging(service_name=settings.SERVICE_NAME)
logger = logging.getLogger("Companion.Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_tracing(settings.SERVICE_NAME)
    instrument_httpx()
    logger.info("AI Journaling Companion running on port %s", settings.PORT)
    logger.info(
        "AI provider: Claude API (%s)",
        "configured" if settings.ANTHROPIC_API_KEY else "keyword fallback only",
    )
    logger.info("Calendar timezone: %s", settings.JOURNAL_TIMEZONE_NAME or "server local time")
    yield
    shutdown_tracing()


app = FastAPI(
    title="Journal Companion Service",
    description="AI journaling companion: entry analysis, replies and wellbeing metrics",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(CorrelationMiddleware)

instrument_app(app)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return validation_error(
        "Invalid request",
        details={"errors": [
            {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
            for error in exc.errors()
        ]},
        correlation_id=get_correlation_id(request),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return internal_error(correlation_id=get_correlation_id(request))


app.include_router(router, prefix="/api")


@app.get("/")
async def root():
    return {"message": "Journal Companion Service Running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
