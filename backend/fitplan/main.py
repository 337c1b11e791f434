import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitplan import config
from fitplan.api import login, profile, users
from fitplan.api.errors import register_error_handlers
from fitplan.backends import build_backend
from fitplan.services.plan_generator import PlanGenerator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    backend = app.state.backend
    backend.startup()
    logger.info(f"Storage backend '{backend.name}' ready")
    yield
    backend.shutdown()


def create_app(backend=None, plan_generator=None) -> FastAPI:
    """
    Build the application. The storage backend and plan generator live on
    ``app.state`` for the app's lifetime; tests pass their own.
    """
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(title="FitPlan API", lifespan=lifespan)
    app.state.backend = backend or build_backend()
    app.state.plan_generator = plan_generator or PlanGenerator()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    app.include_router(users.router)
    app.include_router(login.router)
    app.include_router(profile.router)

    # Root endpoint
    @app.get("/")
    def root():
        return {
            "message": "Welcome to FitPlan API",
            "docs": "/docs",
        }

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "healthy", "message": "API is running"}

    return app


app = create_app()
