"""FastAPI application factory with Lambda handler."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mangum import Mangum

from .config import Settings, settings
from .routes import health
from .routes.skill import build_skill_router
from .services.authenticator import RequestAuthenticator
from .services.dispatcher import SkillRouter

# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    skills: SkillRouter,
    app_settings: Settings | None = None,
    authenticator: RequestAuthenticator | None = None,
) -> FastAPI:
    """
    Build the skill server application.

    Args:
        skills: Skills to serve, keyed by path under the echo prefix
        app_settings: Settings to use (defaults to environment settings)
        authenticator: Request authenticator (defaults to one built from settings)

    Returns:
        FastAPI application with the health and skill routes mounted
    """
    app_settings = app_settings or settings
    authenticator = authenticator or RequestAuthenticator.from_settings(app_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler for startup/shutdown events."""
        logger.info(
            f"Starting {app_settings.service_name} in {app_settings.environment} mode "
            f"with {len(skills)} skill(s)"
        )
        if app_settings.dev_bypass_enabled:
            logger.warning("Dev bypass is enabled; requests with ?_dev= skip verification")
        yield
        logger.info(f"Shutting down {app_settings.service_name}")

    app = FastAPI(
        title="Alexa Skill Server",
        description="Verified webhook endpoints for Alexa custom skills",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if app_settings.debug else None,
        redoc_url="/redoc" if app_settings.debug else None,
    )
    app.state.settings = app_settings
    app.state.skills = skills

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    app.include_router(health.router)
    app.include_router(build_skill_router(skills, authenticator, app_settings))

    return app


def create_lambda_handler(app: FastAPI) -> Mangum:
    """Wrap the application for AWS Lambda via Mangum."""
    return Mangum(app, lifespan="off")
