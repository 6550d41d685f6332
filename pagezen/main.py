import logging
import logging.config
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from pagezen.config import settings
from pagezen.routers.extract import limiter, router as extract_router
from pagezen.routers.opengraph import router as opengraph_router

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
            "console": {
                "format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if settings.is_production else "console",
            },
        },
        "root": {"level": settings.log_level, "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Page Zen API server (env=%s)", settings.env)
    yield
    logger.info("Server exiting")


app = FastAPI(
    title="Page Zen – Article Extraction API",
    description="Fetches a URL, strips boilerplate, and returns the article text, Markdown, and social metadata.",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Accept", "Authorization", "Content-Type"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "HTTP request: client_ip=%s method=%s path=%s status_code=%d latency_ms=%.1f user_agent=%s",
        request.client.host if request.client else "-",
        request.method,
        request.url.path,
        response.status_code,
        latency_ms,
        request.headers.get("user-agent", "-"),
    )
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("Invalid request body for %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"success": False, "message": f"Invalid request body: {_describe(exc)}"},
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"success": False, "message": "Internal server error"})


def _describe(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item != "body")
        parts.append(f"{location}: {error.get('msg', 'invalid')}" if location else error.get("msg", "invalid"))
    return "; ".join(parts)


app.include_router(extract_router)
app.include_router(opengraph_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello World"}


def main() -> None:
    """Run the API server; SIGINT/SIGTERM give in-flight requests 5 seconds to finish."""
    import uvicorn

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_config=None,
        timeout_graceful_shutdown=5,
    )


if __name__ == "__main__":
    main()
