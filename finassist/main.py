"""Main FastAPI application."""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finassist import __version__
from finassist.assistant import routes as assistant_routes
from finassist.config import settings
from finassist.middleware import setup_rate_limiting

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging() -> None:
    """Configure the root logger once."""
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)


def create_app() -> FastAPI:
    app = FastAPI(
        title="Finance Assistant API",
        description="Conversational assistant over a personal finance tracker",
        version=__version__,
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    setup_rate_limiting(app)

    app.include_router(assistant_routes.router, prefix=settings.API_V1_PREFIX, tags=["Assistant"])

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "message": "Finance Assistant API",
            "version": __version__,
            "docs": "/docs",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


configure_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "finassist.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
    )
