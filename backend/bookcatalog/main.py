"""
Book Catalog - Main FastAPI Application

Read-only catalog service supporting:
- Faceted search (text, genre, minimum rating, tag) with sorting and pagination
- Homepage feed grouped by the most populous genres
- Content-based similar books scored by shared attributes
- Structured Logging
- Prometheus Metrics
- Rate Limiting
"""

from fastapi import FastAPI, status, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text

from .config import settings
from .api import api_router
from .exceptions import StoreUnavailableError
from .utils.database import init_db, SessionLocal
from .utils.logging import (
    setup_logging,
    get_logger,
    configure_uvicorn_logging,
    bind_request_context,
    clear_request_context,
    REQUEST_ID_HEADER,
)
from .utils.metrics import setup_metrics
from .utils.rate_limit import limiter

# Setup structured logging
setup_logging(log_level=settings.LOG_LEVEL)
configure_uvicorn_logging()
logger = get_logger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, max-age=0",
    "Pragma": "no-cache",
    "Expires": "0",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""

    logger.info("Starting Book Catalog", version=settings.VERSION, environment=settings.ENVIRONMENT)

    logger.info("Initializing database")
    init_db()

    logger.info("Book Catalog started successfully")

    yield

    logger.info("Shutting down Book Catalog")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    # Book Catalog API

    Read-only query service over a catalog of books.

    ## Endpoints

    - `GET /api/v1/search`: text, genre and rating filters with `popularity`, `rating` or `title` sort.
      Pagination metadata is returned in `X-Total-Count`, `X-Per-Page`, `X-Page` and `X-Total-Pages`.
      A request without any filter returns an empty list.
    - `GET /api/v1/homepage_feed`: top genres by book count with their most-rated books.
    - `GET /api/v1/books/{id}/similar`: books ranked by shared genres, same author and rating.
    - `GET /api/v1/genres`, `GET /api/v1/all_tags`: distinct labels.
    """,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "books", "description": "Catalog search, feed and similar books"},
    ]
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "X-Per-Page", "X-Page", "X-Total-Pages", REQUEST_ID_HEADER],
)

# Add rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# Setup Prometheus metrics
setup_metrics(app)

# Include routers
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.exception_handler(StoreUnavailableError)
async def store_unavailable_handler(request: Request, exc: StoreUnavailableError):
    """Store outages are retryable; tell the client when to come back"""

    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Catalog store unavailable"},
        headers={"Retry-After": str(settings.STORE_RETRY_AFTER)}
    )


# Middleware for logging requests
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests under a request id and disable caching of API responses"""
    request_id = bind_request_context(
        request.headers.get(REQUEST_ID_HEADER),
        method=request.method,
        path=request.url.path
    )
    logger.info(
        "Request received",
        url=str(request.url),
        client=request.client.host if request.client else None
    )

    try:
        response = await call_next(request)
    except Exception:
        logger.exception("Request failed")
        clear_request_context()
        raise

    response.headers[REQUEST_ID_HEADER] = request_id

    if request.url.path.startswith(settings.API_V1_STR):
        response.headers.update(NO_CACHE_HEADERS)

    logger.info("Request completed", status_code=response.status_code)
    clear_request_context()

    return response


@app.get("/", tags=["root"])
def root():
    """Root endpoint"""
    return {
        "message": "Book Catalog API",
        "version": settings.VERSION,
        "docs": "/docs",
        "status": "operational"
    }


@app.get("/health", tags=["root"], status_code=status.HTTP_200_OK)
def health_check():
    """Health check endpoint"""

    db_healthy = True
    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        db_healthy = False

    return {
        "status": "healthy" if db_healthy else "degraded",
        "database": "connected" if db_healthy else "disconnected",
        "version": settings.VERSION
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "bookcatalog.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
