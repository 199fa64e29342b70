"""FastAPI application entry point."""
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recipe_admin.api.router import api_router
from recipe_admin.core.config import settings
from recipe_admin.core.database import close_storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Print startup banner and release storage on shutdown."""
    base_url = f"http://{settings.host}:{settings.port}"
    print("=" * 60)
    print(f"{settings.app_name} v{settings.api_version}")
    print("=" * 60)
    print(f"✓ CORS origins: {settings.cors_origins_list}")
    print(f"✓ Storage: {'DATABASE_URL' if settings.database_url else settings.database_path}")
    if not settings.openai_api_key:
        print("⚠ OPENAI_API_KEY not set - starting jobs will fail")
    print("-" * 60)
    print(f"📚 API Docs:    {base_url}/docs")
    print(f"💓 Health:      {base_url}/api/health")
    print("=" * 60)
    yield
    print("\nShutting down...")
    close_storage()
    print("✓ Stopped")


app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": settings.api_version}


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to log all errors."""
    print(f"ERROR: {request.method} {request.url.path}")
    print(f"Exception: {type(exc).__name__}: {exc}")
    traceback.print_exc()
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc), "type": type(exc).__name__}
    )


app.include_router(api_router)
