import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from core.config import settings
from core.database import init_db
from core.limiter import init_redis
from fastapi_limiter import FastAPILimiter

# Configure logging
logging.basicConfig(
    level=logging.INFO if settings.ENVIRONMENT == "production" else logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from routers import ads
from services.error_monitoring import log_error_with_context

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Medicine Ads API Server...")
    init_db()
    # Initialize Redis for click rate limiting
    redis_conn = await init_redis()
    if redis_conn:
        await FastAPILimiter.init(redis_conn)
        logger.info("✅ Rate limiter initialized.")
    else:
        logger.warning("⚠️ Rate limiting will be disabled (Redis unavailable).")
    yield
    # Shutdown
    if redis_conn:
        await FastAPILimiter.close()
    logger.info("🛑 Shutting down Server...")

app = FastAPI(
    title="Medicine Ads API",
    description="Sponsored medicine ads for the patient and doctor dashboards",
    version="1.0.0",
    lifespan=lifespan
)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        settings.FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:5173"
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ads.router)

# Validation exception handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    error_details = [{"field": ".".join(str(loc) for loc in e["loc"]), "message": e["msg"]} for e in errors]
    return JSONResponse(
        status_code=422,
        content={"success": False, "detail": error_details, "message": "Validation error"}
    )

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    log_error_with_context(exc, request)
    return JSONResponse(
        status_code=500,
        content={"success": False, "detail": "Internal server error.", "message": str(exc) if settings.ENVIRONMENT != "production" else "An unexpected error occurred."}
    )

@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": "ads-api", "version": "1.0.0"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT, reload=(settings.ENVIRONMENT=="development"))
