"""FastAPI app with carousel routes, request logging and error mapping"""
import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from carousel.config import get_settings
from carousel.errors import CarouselError
from carousel.logging_config import setup_logging
from carousel.routes import ENGINE, VERSION, router

logger = logging.getLogger(__name__)

AVAILABLE_ENDPOINTS = [
    "GET /health",
    "POST /api/generate-carousel",
]

STARTED_AT = time.monotonic()


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(f"Carousel API started (port {settings.port}, fit strategy {settings.fit_strategy})")
    yield
    logger.info("Shutting down...")


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    request_id = uuid.uuid4().hex[:7]
    request.state.request_id = request_id
    start_time = time.perf_counter()
    logger.info(f"[{request_id}] {request.method} {request.url.path} from {request.client.host if request.client else '-'}")

    response = await call_next(request)

    duration = (time.perf_counter() - start_time) * 1000
    level = logging.ERROR if response.status_code >= 400 else logging.WARNING if response.status_code >= 300 else logging.INFO
    logger.log(level, f"[{request_id}] Request completed {response.status_code} ({duration:.0f}ms)")
    response.headers["X-Request-ID"] = request_id
    return response


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


@app.exception_handler(CarouselError)
async def carousel_error_handler(request: Request, exc: CarouselError):
    logger.warning(f"[{_request_id(request)}] Application error {exc.code}: {exc.message}")
    return JSONResponse(exc.to_dict(_request_id(request)), status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return JSONResponse(
        {
            "error": "Invalid request body",
            "code": "INVALID_INPUT",
            "requestId": _request_id(request),
            "details": {"errors": errors},
        },
        status_code=400,
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception(f"[{_request_id(request)}] Unexpected error")
    return JSONResponse(
        {"error": "Internal server error", "code": "INTERNAL_SERVER_ERROR", "requestId": _request_id(request)},
        status_code=500,
    )


# Health check
@app.get("/health")
def health():
    return {
        "status": "healthy",
        "engine": ENGINE,
        "version": VERSION,
        "uptime": int(time.monotonic() - STARTED_AT),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


app.include_router(router, prefix="/api")


@app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
def catch_all(path: str, request: Request):
    logger.warning(f"Route not found: {request.method} /{path}")
    return JSONResponse(
        {"error": "Route not found", "code": "NOT_FOUND", "availableEndpoints": AVAILABLE_ENDPOINTS},
        status_code=404,
    )
