"""
Database connection (SQLAlchemy)

Centralizes engine creation, the session factory, schema creation and the
default catalog seed. The default DATABASE_URL is a local SQLite file; any
SQLAlchemy URL for an engine with transactions works.
"""
import logging

from sqlalchemy import create_engine, event, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from .config import settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base for ORM models"""


# ============================================================================
# Engine / session factory
# ============================================================================

def make_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine for database_url

    For SQLite connections this turns on foreign keys and WAL journaling,
    so readers keep seeing the last committed state while a commit runs.

    Args:
        database_url: SQLAlchemy URL (e.g. "sqlite:///./booth_pos.db")
        echo: Log every SQL statement

    Returns:
        Configured Engine
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False, "timeout": 10} if is_sqlite else {}

    engine = create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,  # Verify connection before use
        connect_args=connect_args,
    )

    if is_sqlite:
        @event.listens_for(engine, "connect")
        def _set_sqlite_pragmas(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if ":memory:" not in database_url:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


engine = make_engine(settings.DATABASE_URL, echo=settings.DATABASE_ECHO)

SessionLocal = make_session_factory(engine)


# ============================================================================
# Schema and default data
# ============================================================================

DEFAULT_CATEGORIES = [
    ("snack", "Snack", "#e8a735"),
    ("boisson-sans-alcool", "Boisson sans alcool", "#3b82f6"),
    ("alcool", "Alcool", "#8b5cf6"),
    ("sucreries", "Sucreries", "#e84393"),
    ("autre", "Autre", "#6b7280"),
]

DEFAULT_PRODUCTS = [
    ("the", "Thé", 100, "boisson-sans-alcool"),
    ("cafe", "Café", 100, "boisson-sans-alcool"),
    ("soda", "Soda", 200, "boisson-sans-alcool"),
    ("jus-de-fruit", "Jus de fruit", 200, "boisson-sans-alcool"),
    ("biere-pichet", "Bière (pichet)", 1200, "alcool"),
    ("biere-25cl", "Bière (25cl)", 300, "alcool"),
    ("cidre-doux", "Cidre (doux)", 300, "alcool"),
    ("cidre-brut", "Cidre (brut)", 300, "alcool"),
    ("consigne-verre", "Consigne verre", 100, "autre"),
    ("consigne-pichet", "Consigne pichet", 500, "autre"),
    ("bonbon", "Bonbon/M&Ms/Twix", 100, "sucreries"),
    ("part-de-gateau", "Part de gâteau", 100, "sucreries"),
    ("crepe-nature", "Crêpe nature", 200, "sucreries"),
    ("crepe-sucre", "Crêpe au sucre", 250, "sucreries"),
    ("crepe-confiture", "Crêpe à la confiture", 350, "sucreries"),
    ("crepe-caramel", "Crêpe au caramel", 350, "sucreries"),
    ("crepe-nutella", "Crêpe au Nutella", 350, "sucreries"),
    ("cake-sale", "Cake salé", 100, "snack"),
    ("sandwich", "Sandwich", 400, "snack"),
    ("panini", "Panini", 400, "snack"),
]


def init_db(bind: Engine = None, seed: bool = None) -> None:
    """
    Create tables if missing and insert the default catalog

    Rows that already exist are left untouched, so running this on every
    startup never overwrites catalog edits.
    """
    from booth_pos.models import CategoryRecord, ProductRecord

    bind = bind or engine
    seed = settings.SEED_DEFAULT_CATALOG if seed is None else seed

    Base.metadata.create_all(bind)
    if not seed:
        return

    with Session(bind) as session, session.begin():
        existing_categories = set(session.scalars(select(CategoryRecord.id)))
        for category_id, label, color in DEFAULT_CATEGORIES:
            if category_id not in existing_categories:
                session.add(CategoryRecord(id=category_id, label=label, color=color))

        # Categories must exist before products reference them
        session.flush()

        existing_products = set(session.scalars(select(ProductRecord.id)))
        added = 0
        for product_id, name, price, category_id in DEFAULT_PRODUCTS:
            if product_id not in existing_products:
                session.add(ProductRecord(
                    id=product_id,
                    name=name,
                    unit_price=price,
                    category_id=category_id,
                    available=True,
                ))
                added += 1

    if added:
        logger.info(f"Seeded {added} default products")
