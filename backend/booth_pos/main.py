"""
Booth POS - Backend API
Register, transaction history and sales dashboard for an event booth
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import sessionmaker

# Load environment variables before settings are read
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from booth_pos.api import cart, dashboard, orders, products
from booth_pos.core import database
from booth_pos.core.config import settings
from booth_pos.core.logging_config import configure_logging
from booth_pos.domain.cart import OrderBuilder
from booth_pos.repositories.order_repository import TransactionRepository
from booth_pos.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def create_app(session_factory: Optional[sessionmaker] = None, init_database: bool = True) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        session_factory: Session factory to use (defaults to the one bound to
            settings.DATABASE_URL)
        init_database: Create tables and seed the default catalog on startup
    """
    configure_logging(settings.LOG_LEVEL)

    session_factory = session_factory or database.SessionLocal

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if init_database:
            database.init_db(session_factory.kw["bind"])
        logger.info(f"{settings.API_TITLE} {settings.API_VERSION} ready")
        yield

    app = FastAPI(
        title=settings.API_TITLE,
        version=settings.API_VERSION,
        description=settings.API_DESCRIPTION,
        debug=settings.API_DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # One register: one catalog, one store, one cart per application instance
    app.state.session_factory = session_factory
    app.state.products = ProductRepository(session_factory)
    app.state.transactions = TransactionRepository(session_factory)
    app.state.cart = OrderBuilder(catalog=app.state.products)

    app.include_router(products.router, prefix="/api/v1", tags=["Catalog"])
    app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
    app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
    app.include_router(dashboard.router, prefix="/api/v1", tags=["Dashboard"])

    @app.get("/")
    async def root():
        return {
            "message": settings.API_TITLE,
            "status": "online",
            "version": settings.API_VERSION,
        }

    @app.get("/health")
    async def health():
        """Health check - tests database connectivity"""
        db_status = "connected"
        db_error = None
        session = app.state.session_factory()
        try:
            session.execute(text("SELECT 1"))
        except Exception as e:
            db_status = "disconnected"
            db_error = str(e)
        finally:
            session.close()

        return {
            "status": "healthy" if db_status == "connected" else "degraded",
            "service": "booth-pos",
            "version": settings.API_VERSION,
            "database": {"status": db_status, "error": db_error},
        }

    return app


app = create_app()
