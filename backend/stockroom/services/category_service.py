# Overview: Service-layer operations for categories; uniqueness-checked CRUD.

from __future__ import annotations

from sqlalchemy import func

from ..extensions import db
from ..models import Category, Product
from ..validation import ConflictError, ValidationError
from .transaction import run_in_transaction


def _clean_name(name) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("category name is required")
    name = name.strip()
    if len(name) > 120:
        raise ValidationError("category name exceeds max length 120")
    return name


def _find_by_name(name: str, *, exclude_id: int | None = None) -> Category | None:
    # Case-insensitive: "Shorts" and "shorts" are the same category
    q = db.session.query(Category).filter(func.lower(Category.name) == name.lower())
    if exclude_id is not None:
        q = q.filter(Category.id != exclude_id)
    return q.first()


def get_or_create_category(name: str) -> Category:
    """Resolve a category by name inside the caller's transaction, creating it if missing."""
    name = _clean_name(name)
    category = _find_by_name(name)
    if category is None:
        category = Category(name=name)
        db.session.add(category)
        db.session.flush()
    return category


def list_categories() -> list[Category]:
    return db.session.query(Category).order_by(Category.name.asc()).all()


def count_products(category_id: int) -> int:
    return db.session.query(Product).filter_by(category_id=category_id).count()


def add_category(name: str) -> Category:
    name = _clean_name(name)

    def _op():
        if _find_by_name(name) is not None:
            raise ConflictError(f"Category '{name}' already exists")
        category = Category(name=name)
        db.session.add(category)
        db.session.flush()
        return category

    return run_in_transaction(_op)


def update_category(category_id: int, new_name: str) -> Category | None:
    """
    Rename a category. Products follow through their foreign key.
    Unknown ids are a no-op and return None.
    """
    new_name = _clean_name(new_name)

    def _op():
        category = db.session.get(Category, category_id)
        if category is None:
            return None
        if _find_by_name(new_name, exclude_id=category_id) is not None:
            raise ConflictError(f"Category '{new_name}' already exists")
        category.name = new_name
        return category

    return run_in_transaction(_op)


def delete_category(category_id: int) -> bool:
    """
    Delete a category that no product references.

    Raises ConflictError while products still use it; unknown ids return False.
    """
    def _op():
        category = db.session.get(Category, category_id)
        if category is None:
            return False
        in_use = count_products(category_id)
        if in_use:
            raise ConflictError(
                f"Category '{category.name}' is used by {in_use} product(s) and cannot be deleted"
            )
        db.session.delete(category)
        return True

    return run_in_transaction(_op)
