"""Persistence of Product records."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, defer

from app.exceptions import (
    ProductNotFoundError,
    ProductValidationError,
    StoreError,
    field_error,
    message_for,
)
from app.models.product import Product

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = ("name", "price", "availability")


def check_product_fields(fields: Dict[str, Any]) -> None:
    """
    Enforce the invariants every persisted product must satisfy.

    Raises:
        ProductValidationError: name empty or price not strictly positive
    """
    errors = []
    if "name" in fields and not fields["name"]:
        errors.append(
            field_error("body", "name", message_for("body", "name", "missing", ""), fields["name"])
        )
    if "price" in fields and (fields["price"] is None or fields["price"] <= 0):
        errors.append(
            field_error(
                "body", "price", message_for("body", "price", "greater_than", ""), fields["price"]
            )
        )
    if errors:
        raise ProductValidationError(errors)


class ProductStore:
    """CRUD access to the ``products`` table over one session."""

    def __init__(self, db: Session):
        self.db = db

    def list_all(self) -> List[Product]:
        """All products, most expensive first. ``updated_at`` is not loaded."""
        query = (
            select(Product)
            .options(defer(Product.updated_at))
            .order_by(Product.price.desc())
        )
        try:
            return list(self.db.scalars(query).all())
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list products: {e}") from e

    def get_by_key(self, product_id: int) -> Optional[Product]:
        """Product with this id, or None."""
        try:
            return self.db.get(Product, product_id)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load product {product_id}: {e}") from e

    def create(self, fields: Dict[str, Any]) -> Product:
        """Insert a product; id and timestamps are assigned by the database."""
        values = {key: fields[key] for key in PRODUCT_FIELDS if key in fields}
        check_product_fields(values)

        product = Product(**values)
        self.db.add(product)
        self._commit(f"create product {values.get('name')!r}", refresh=product)

        logger.info(f"Created product {product.id}")
        return product

    def update(self, product_id: int, fields: Dict[str, Any]) -> Product:
        """Replace the given fields on an existing product."""
        product = self._require(product_id)
        values = {key: fields[key] for key in PRODUCT_FIELDS if key in fields}
        check_product_fields(values)

        for key, value in values.items():
            setattr(product, key, value)
        self._commit(f"update product {product_id}", refresh=product)

        logger.info(f"Updated product {product_id}")
        return product

    def toggle_availability(self, product_id: int) -> Product:
        """Flip ``availability`` and return the row as stored after the write."""
        product = self._require(product_id)
        product.availability = not bool(product.availability)
        # Re-read instead of trusting the in-memory value
        self._commit(f"toggle availability of product {product_id}", refresh=product)

        logger.info(f"Product {product_id} availability is now {product.availability}")
        return product

    def delete(self, product_id: int) -> None:
        product = self._require(product_id)
        self.db.delete(product)
        self._commit(f"delete product {product_id}")
        logger.info(f"Deleted product {product_id}")

    def _require(self, product_id: int) -> Product:
        product = self.get_by_key(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def _commit(self, action: str, refresh: Optional[Product] = None) -> None:
        """Commit, then reload ``refresh`` from the database if given.

        Database errors roll the session back and are re-raised as
        ProductValidationError (constraint violations) or StoreError.
        """
        try:
            self.db.commit()
            if refresh is not None:
                self.db.refresh(refresh)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Database rejected attempt to {action}: {e.orig}")
            raise ProductValidationError(
                [field_error("body", "", "Los datos del producto no son válidos")]
            ) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(f"Failed to {action}: {e}") from e
