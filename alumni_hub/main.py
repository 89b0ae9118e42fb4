from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from alumni_hub.application.dtos.common_dto import HealthResponse, RootResponse
from alumni_hub.domain.services.role_policy import get_policy
from alumni_hub.infrastructure.api.errors import add_exception_handlers
from alumni_hub.infrastructure.api.middlewares import add_default_middlewares
from alumni_hub.infrastructure.api.routes.admin_routes import router as admin_router
from alumni_hub.infrastructure.api.routes.auth_routes import router as auth_router
from alumni_hub.infrastructure.api.routes.profile_routes import router as profile_router
from alumni_hub.infrastructure.config import Settings, ensure_secure_config_on_startup
from alumni_hub.infrastructure.database.postgres_client import PostgresClient
from alumni_hub.infrastructure.database.repositories.profile_repository import ProfileRepository
from alumni_hub.infrastructure.database.supabase_client import SupabaseAuthAdapter, create_supabase_client
from alumni_hub.infrastructure.logging_config import configure_logging


def build_profile_repository(settings: Settings) -> ProfileRepository:
    if settings.use_local_db:
        return ProfileRepository(None, PostgresClient(settings))
    return ProfileRepository(create_supabase_client(settings))


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    configure_logging(settings)
    ensure_secure_config_on_startup(settings)
    # fail at startup on a misspelled policy rather than on the first request
    get_policy(settings.role_claim_policy)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.profiles.close()

    app = FastAPI(
        title="Alumni Hub Backend",
        version="0.1.0",
        description="""
        ## Alumni Hub Backend API

        Profile resolution and approval workflow for the alumni networking portal.
        Supabase provides authentication and the `profiles` table.

        ### Features
        - **Profiles**: Lazily created on first sign-in, one row per auth user
        - **Roles**: STUDENT, ALUMNI, RECRUITER and ADMIN, with legacy labels normalized
        - **Approval**: Alumni and recruiter accounts wait for an administrator
        - **Redirects**: Each role is sent to its own portal area

        ### Authentication
        Session and admin endpoints require a Supabase access token:
        ```
        Authorization: Bearer your-jwt-token
        ```

        ### Error Responses
        - **400 Bad Request**: Missing userId or email
        - **401 Unauthorized**: Missing or invalid authentication token
        - **403 Forbidden**: Account pending approval or not an administrator
        - **404 Not Found**: Profile does not exist
        - **500 Internal Server Error**: Profile store unavailable
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.profiles = build_profile_repository(settings)
    app.state.auth = SupabaseAuthAdapter(settings)
    logger.info("Profile store backend: {}", app.state.profiles.backend)

    add_default_middlewares(app, settings)
    add_exception_handlers(app)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the Alumni Hub API",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "alumni-hub", "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy", "profile_store": app.state.profiles.backend}

    app.include_router(auth_router)
    app.include_router(profile_router)
    app.include_router(admin_router)
    return app


app = create_app()
