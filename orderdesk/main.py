"""
FastAPI Application Entry Point - OrderDesk
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from orderdesk import __version__
from orderdesk.config import settings
from orderdesk.database import init_db
from orderdesk.logging_setup import setup_logging
from orderdesk.api import customers, health, inventory, orders, products, public, reports

logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="OrderDesk",
    description="Order, stock and customer management for a small retail shop",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(products.router)
app.include_router(customers.router)
app.include_router(orders.router)
app.include_router(inventory.router)
app.include_router(reports.router)
app.include_router(public.router)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)


@app.on_event("startup")
def startup_event():
    """Initialize logging and database on startup"""
    log_path = setup_logging(settings)
    logger.info("Starting %s...", settings.SERVICE_NAME)
    init_db()
    logger.info("Database initialized")
    if log_path:
        logger.info("Logging to %s", log_path)
    logger.info("Events %s (exchange %s)",
                "enabled" if settings.EVENTS_ENABLED else "disabled", settings.RABBITMQ_EXCHANGE)
    logger.info("%s is running on port %s", settings.SERVICE_NAME, settings.SERVICE_PORT)


@app.on_event("shutdown")
def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down %s...", settings.SERVICE_NAME)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("orderdesk.main:app", host="0.0.0.0", port=settings.SERVICE_PORT)
