"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from restify.authorization.gate import Gate, default_gate
from restify.config.settings import Settings, settings
from restify.middleware.exception_handler import register_exception_handlers
from restify.middleware.logging_middleware import RequestLoggingMiddleware
from restify.middleware.principal_middleware import PrincipalMiddleware, PrincipalResolver
from restify.repositories.registry import RepositoryRegistry, repository_registry
from restify.routers.repositories import create_repository_router

logger = logging.getLogger(__name__)


def create_app(
    repositories: RepositoryRegistry | None = None,
    gate: Gate | None = None,
    principal_resolver: PrincipalResolver | None = None,
    app_settings: Settings | None = None,
) -> FastAPI:
    """
    Build the application serving the registered repositories.

    Policies are discovered from ``POLICY_MODULES`` for every repository
    model without an explicit policy, then the policy registry is frozen.
    The app serves copies of the registered repositories bound to ``gate``,
    available as ``app.state.repositories``.
    """
    app_settings = app_settings or settings
    logging.getLogger("restify").setLevel(app_settings.LOG_LEVEL)

    repositories = repositories if repositories is not None else repository_registry
    gate = gate if gate is not None else default_gate

    if app_settings.POLICY_MODULES and not gate.registry.frozen:
        gate.registry.discover(repositories.models(), app_settings.POLICY_MODULES)
    gate.registry.freeze()

    repositories = repositories.bind(gate)

    app = FastAPI(
        title=app_settings.API_TITLE,
        version=app_settings.API_VERSION,
        description=app_settings.API_DESCRIPTION,
        openapi_url=f"{app_settings.API_PREFIX}/openapi.json",
        docs_url=f"{app_settings.API_PREFIX}/docs",
        redoc_url=f"{app_settings.API_PREFIX}/redoc",
    )
    app.state.gate = gate
    app.state.repositories = repositories

    # Register exception handlers
    if app_settings.REGISTER_EXCEPTION_HANDLERS:
        register_exception_handlers(app)

    # Principal must be resolved before the routes run
    app.add_middleware(PrincipalMiddleware, resolver=principal_resolver)

    # Request/Response logging middleware (outermost)
    app.add_middleware(
        RequestLoggingMiddleware,
        api_prefix=app_settings.API_PREFIX,
        log_headers=app_settings.ENVIRONMENT == "development",
    )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": app_settings.API_VERSION,
            "environment": app_settings.ENVIRONMENT,
        }

    app.include_router(
        create_repository_router(repositories).router,
        prefix=app_settings.API_PREFIX,
    )

    logger.info(
        "Restify application created",
        extra={
            "repositories": [repository.get_uri_key() for repository in repositories.all()],
            "policies": len(gate.registry),
            "prefix": app_settings.API_PREFIX,
        },
    )
    return app
