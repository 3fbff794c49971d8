"""
Product Repository - Data Access Layer for the catalog

Handles catalog queries and returns Product / Category domain models.
Products are never deleted; availability is toggled instead.
"""
import logging
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from booth_pos.core.database import SessionLocal
from booth_pos.core.exceptions import NotFound, StorageFailure, ValidationError
from booth_pos.domain.product import (
    Category, CategoryCreate, CategoryUpdate, Product, ProductCreate, ProductUpdate,
)
from booth_pos.models import CategoryRecord, ProductRecord

logger = logging.getLogger(__name__)


class ProductRepository:
    """
    Repository for Product data access

    Returns Product domain models, not ORM rows.
    """

    def __init__(self, session_factory: Optional[sessionmaker] = None):
        self._session_factory = session_factory or SessionLocal

    @staticmethod
    def _map_record_to_product(record: ProductRecord) -> Product:
        return Product(
            id=record.id,
            name=record.name,
            unit_price=record.unit_price,
            category_id=record.category_id,
            available=record.available,
        )

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by ID

        Returns:
            Product or None if not found
        """
        session = self._session_factory()
        try:
            record = session.get(ProductRecord, product_id)
            return self._map_record_to_product(record) if record else None
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not read product {product_id}: {e}") from e
        finally:
            session.close()

    def find_all(self, available_only: bool = False, category_id: Optional[str] = None) -> List[Product]:
        """
        List products ordered by name

        Args:
            available_only: Only products currently on sale
            category_id: Filter by category
        """
        session = self._session_factory()
        try:
            query = select(ProductRecord)
            if available_only:
                query = query.where(ProductRecord.available.is_(True))
            if category_id:
                query = query.where(ProductRecord.category_id == category_id)
            records = session.scalars(query.order_by(ProductRecord.name)).all()
            return [self._map_record_to_product(record) for record in records]
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not list products: {e}") from e
        finally:
            session.close()

    def list_categories(self) -> List[Category]:
        session = self._session_factory()
        try:
            records = session.scalars(select(CategoryRecord).order_by(CategoryRecord.label)).all()
            return [Category.model_validate(record) for record in records]
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not list categories: {e}") from e
        finally:
            session.close()

    def create_category(self, data: CategoryCreate) -> Category:
        """
        Create a category under the caller's slug

        Raises:
            ValidationError: The slug is already taken
        """
        session = self._session_factory()
        try:
            with session.begin():
                if session.get(CategoryRecord, data.id) is not None:
                    raise ValidationError(f"Category already exists: {data.id}")
                record = CategoryRecord(id=data.id, label=data.label, color=data.color)
                session.add(record)
                session.flush()
                category = Category.model_validate(record)
        except IntegrityError as e:
            raise ValidationError(f"Category rejected by the database: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not create category: {e}") from e
        finally:
            session.close()

        logger.info(f"Created category {category.id} ({category.label})")
        return category

    def update_category(self, category_id: str, data: CategoryUpdate) -> Category:
        """
        Change a category's label and/or color

        Raises:
            NotFound: Unknown category_id
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        session = self._session_factory()
        try:
            with session.begin():
                record = session.get(CategoryRecord, category_id)
                if record is None:
                    raise NotFound(f"Category not found: {category_id}")
                for field, value in changes.items():
                    setattr(record, field, value)
                session.flush()
                category = Category.model_validate(record)
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not update category {category_id}: {e}") from e
        finally:
            session.close()

        logger.info(f"Updated category {category_id}: {sorted(changes)}")
        return category

    def create(self, data: ProductCreate) -> Product:
        """Create an available product with a generated ID"""
        session = self._session_factory()
        try:
            with session.begin():
                self._require_category(session, data.category_id)
                record = ProductRecord(
                    id=str(uuid.uuid4()),
                    name=data.name,
                    unit_price=data.unit_price,
                    category_id=data.category_id,
                    available=True,
                )
                session.add(record)
                session.flush()
                product = self._map_record_to_product(record)
        except IntegrityError as e:
            raise ValidationError(f"Product rejected by the database: {e.orig}") from e
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not create product: {e}") from e
        finally:
            session.close()

        logger.info(f"Created product {product.id} ({product.name}, {product.unit_price})")
        return product

    def update(self, product_id: str, data: ProductUpdate) -> Product:
        """
        Apply a partial update

        Past transactions keep their own name/price snapshot, so this never
        changes reported revenue.

        Raises:
            NotFound: Unknown product_id
        """
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        session = self._session_factory()
        try:
            with session.begin():
                record = session.get(ProductRecord, product_id)
                if record is None:
                    raise NotFound(f"Product not found: {product_id}")
                if "category_id" in changes:
                    self._require_category(session, changes["category_id"])
                for field, value in changes.items():
                    setattr(record, field, value)
                session.flush()
                product = self._map_record_to_product(record)
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not update product {product_id}: {e}") from e
        finally:
            session.close()

        logger.info(f"Updated product {product_id}: {sorted(changes)}")
        return product

    def toggle_available(self, product_id: str) -> Product:
        """Flip the product's availability and return the new state"""
        session = self._session_factory()
        try:
            with session.begin():
                record = session.get(ProductRecord, product_id)
                if record is None:
                    raise NotFound(f"Product not found: {product_id}")
                record.available = not record.available
                session.flush()
                product = self._map_record_to_product(record)
        except SQLAlchemyError as e:
            raise StorageFailure(f"Could not toggle product {product_id}: {e}") from e
        finally:
            session.close()

        logger.info(f"Product {product_id} available={product.available}")
        return product

    @staticmethod
    def _require_category(session, category_id: str) -> None:
        if session.get(CategoryRecord, category_id) is None:
            raise ValidationError(f"Unknown category: {category_id}")
