"""Mouse Maze API - Main FastAPI Application."""

import logging
import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from mouse_maze.api.routes import maze
from mouse_maze.config import get_settings
from mouse_maze.services.maze_workshop import get_maze_workshop

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("mouse_maze")


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded):
    """Handle rate limit exceeded errors."""
    logger.warning(
        f"Maze creation rate limit exceeded for {request.client.host if request.client else 'unknown'} "
        f"on {request.url.path}"
    )
    return JSONResponse(
        status_code=429,
        content={
            "detail": "Too many mazes created. Please slow down.",
            "retry_after": str(exc.detail),
        },
    )


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging requests with correlation IDs."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        request.state.request_id = request_id

        logger.info(
            f"[{request_id}] --> {request.method} {request.url.path} "
            f"from {request.client.host if request.client else 'unknown'}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                f"[{request_id}] <-- ERROR: {type(e).__name__}: {str(e)} "
                f"({process_time:.2f}ms)"
            )
            raise

        process_time = (time.time() - start_time) * 1000
        # Routing fills in path params, so the maze id is known by now
        maze_id = request.path_params.get("maze_id")
        logger.info(
            f"[{request_id}] <-- {response.status_code} "
            f"({process_time:.2f}ms)"
            + (f" maze={maze_id}" if maze_id else "")
        )

        response.headers["X-Request-ID"] = request_id
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Mouse Maze API...")

    # Startup: load finalized mazes from files
    mazes_dir = settings.mazes_dir
    if mazes_dir is not None and mazes_dir.is_dir():
        added = get_maze_workshop().seed_from_directory(mazes_dir)
        logger.info(f"Loaded {added} mazes from {mazes_dir}")
    else:
        logger.info("No mazes directory configured, workshop starts empty")

    yield

    logger.info("Shutting down Mouse Maze API...")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Micromouse maze workshop: build, edit and render wall mazes",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Add rate limiter to app state
app.state.limiter = maze.limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# Add request logging middleware
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "version": settings.app_version}


@app.get("/")
async def root() -> dict:
    """Root endpoint with API info."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
    }


# Include routers
app.include_router(maze.router, prefix="/v1")


def run() -> None:
    """Serve the API with uvicorn."""
    import uvicorn

    uvicorn.run("mouse_maze.main:app", host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
