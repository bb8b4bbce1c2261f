from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
from slowapi.errors import RateLimitExceeded
import time
import uuid

from .config import settings
from .database import create_tables
from .services.price_calculator import PricingError
from .utils.logging_config import setup_logging, get_logger, set_request_context, clear_request_context
from .utils.rate_limiter import limiter

from .routers import contracts, rate_bands, pricing, health

setup_logging(level=settings.log_level, json_format=settings.log_json)
logger = get_logger("app.main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting pricing service ({settings.environment})")
    logger.info(f"CORS origins: {settings.cors_origins}")

    create_tables()
    logger.info("Database ready")

    yield

    logger.info("Shutting down pricing service")


# Create FastAPI app
app = FastAPI(
    title="Tour Operator Pricing API",
    description="Rate bands, supplier contracts and stay pricing",
    version="1.0.0",
    lifespan=lifespan
)

# Rate limiter state
app.state.limiter = limiter


# ================================
# CORS MIDDLEWARE - MUST BE FIRST!
# ================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)


# Request ID Middleware
class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4())[:8])
        request.state.request_id = request_id
        set_request_context(request_id)
        start = time.perf_counter()
        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            # Logged before the context is cleared so the line keeps request_id
            logger.api_request(
                request.method,
                request.url.path,
                response.status_code,
                round((time.perf_counter() - start) * 1000, 2)
            )
            return response
        finally:
            clear_request_context()


app.add_middleware(RequestIdMiddleware)


# Rate limit handler
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=429,
        content={"detail": "Too many pricing requests, try again later"}
    )


# Unpriceable stays: configuration problems the operator has to fix
@app.exception_handler(PricingError)
async def pricing_error_handler(request: Request, exc: PricingError):
    return JSONResponse(
        status_code=422,
        content={"detail": str(exc), "error": exc.kind}
    )


# Include routers
app.include_router(contracts.router)
app.include_router(rate_bands.router)
app.include_router(pricing.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {
        "message": "Tour Operator Pricing API",
        "version": "1.0.0",
        "docs": "/docs",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
