"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging) and exception handlers, and includes all API routers. It
serves as the root of the web server.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from corporate_advisor.core.database import init_db
from corporate_advisor.core.logging_config import get_logger, setup_logging
from corporate_advisor.core.monitoring import initialize_logfire

from .api.v1 import auth, chat, coupons, health, inquiries, projects, public, user
from .api.v1.admin import content as admin_content
from .api.v1.admin import coupons as admin_coupons
from .api.v1.admin import credits as admin_credits
from .api.v1.admin import inquiries as admin_inquiries
from .api.v1.admin import knowledge as admin_knowledge
from .api.v1.admin import policies as admin_policies
from .api.v1.admin import projects as admin_projects
from .api.v1.admin import revenue as admin_revenue
from .api.v1.admin import users as admin_users
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import LogfireMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Initializes the database on startup; a failure is logged and the server
    keeps running so that health checks stay reachable.
    """
    # Startup
    try:
        logger.info("Starting up Corporate AI Advisor Server...")
        await init_db()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    yield

    # Shutdown
    logger.info("Shutting down Corporate AI Advisor Server...")


app = FastAPI(
    title=constant.PROJECT_NAME,
    description="""
    Corporate AI Advisor Server API

    Backend of the AI corporate-consulting service: company projects and document uploads,
    Gemini-powered risk and solution analysis, slide and PDF reports, subscriptions, coupons,
    credits and the back-office administration.
    """,
    version=constant.VERSION,
    openapi_url=f"{constant.API_V1_STR}/openapi.json",
    docs_url=f"{constant.API_V1_STR}/docs",
    redoc_url=f"{constant.API_V1_STR}/redoc",
    lifespan=lifespan,
)

# Set all CORS enabled origins
cors = settings.cors
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors.origins,
    allow_credentials=cors.allow_credentials,
    allow_methods=cors.allow_methods,
    allow_headers=cors.allow_headers,
)
app.add_middleware(LogfireMiddleware)

setup_exception_handlers(app)
initialize_logfire(app)

app.include_router(health.router, tags=["health"])
app.include_router(auth.router, prefix=f"{constant.API_V1_STR}/auth", tags=["auth"])
app.include_router(user.router, prefix=f"{constant.API_V1_STR}/user", tags=["user"])
app.include_router(coupons.router, prefix=f"{constant.API_V1_STR}/coupons", tags=["coupons"])
app.include_router(projects.router, prefix=f"{constant.API_V1_STR}/projects", tags=["projects"])
app.include_router(public.router, prefix=constant.API_V1_STR, tags=["public"])
app.include_router(inquiries.router, prefix=f"{constant.API_V1_STR}/inquiries", tags=["inquiries"])
app.include_router(chat.router, prefix=f"{constant.API_V1_STR}/chat", tags=["chat"])

ADMIN_PREFIX = f"{constant.API_V1_STR}/admin"
app.include_router(admin_coupons.router, prefix=f"{ADMIN_PREFIX}/coupons", tags=["admin"])
app.include_router(admin_policies.router, prefix=f"{ADMIN_PREFIX}/policies", tags=["admin"])
app.include_router(admin_content.router, prefix=ADMIN_PREFIX, tags=["admin"])
app.include_router(admin_inquiries.router, prefix=f"{ADMIN_PREFIX}/inquiries", tags=["admin"])
app.include_router(admin_knowledge.router, prefix=f"{ADMIN_PREFIX}/chatbot-knowledge", tags=["admin"])
app.include_router(admin_users.router, prefix=f"{ADMIN_PREFIX}/users", tags=["admin"])
app.include_router(admin_projects.router, prefix=f"{ADMIN_PREFIX}/projects", tags=["admin"])
app.include_router(admin_revenue.router, prefix=f"{ADMIN_PREFIX}/revenue", tags=["admin"])
app.include_router(admin_credits.router, prefix=ADMIN_PREFIX, tags=["admin"])
