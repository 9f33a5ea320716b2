"""
Category lookups by name and default category seeding.

Client input always refers to categories by name; only active records can be
resolved, so soft-deleted categories are unreachable from outside.
"""

from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy import delete, func
from sqlmodel import Session, col, select

from app.core.logging import get_logger
from app.db.seed_data import DEFAULT_CATEGORIES
from app.models.category import Category, Subcategory

logger = get_logger(__name__)


class CategoryService:
    """Service class for category and subcategory operations."""

    @staticmethod
    def find_active_category(session: Session, name: str) -> Optional[Category]:
        statement = select(Category).where(
            Category.name == name.strip(), col(Category.is_active).is_(True)
        )
        return session.exec(statement).first()

    @staticmethod
    def find_active_subcategories(
        session: Session, name: str, category_id: Optional[int] = None
    ) -> List[Subcategory]:
        """
        Active subcategories with this name. Names are only unique within a
        category, so without ``category_id`` several may match.
        """
        statement = select(Subcategory).where(
            Subcategory.name == name.strip(), col(Subcategory.is_active).is_(True)
        )
        if category_id is not None:
            statement = statement.where(Subcategory.category_id == category_id)
        return list(session.exec(statement))

    @staticmethod
    def active_category_map(session: Session) -> Dict[str, List[str]]:
        """Map of active category name to its active subcategory names, in display order."""
        categories = session.exec(
            select(Category).where(col(Category.is_active).is_(True)).order_by(col(Category.order))
        ).all()
        result: Dict[str, List[str]] = {}
        for category in categories:
            subcategories = session.exec(
                select(Subcategory)
                .where(
                    Subcategory.category_id == category.id,
                    col(Subcategory.is_active).is_(True),
                )
                .order_by(col(Subcategory.order))
            ).all()
            result[category.name] = [sub.name for sub in subcategories]
        return result

    @staticmethod
    def name_maps(
        session: Session, category_ids: Iterable[int], subcategory_ids: Iterable[int]
    ) -> Tuple[Dict[int, str], Dict[int, str]]:
        """Id to name lookups for rendering suggestions (inactive included)."""
        category_ids = set(category_ids)
        subcategory_ids = set(subcategory_ids)
        categories: Dict[int, str] = {}
        subcategories: Dict[int, str] = {}
        if category_ids:
            for category in session.exec(select(Category).where(col(Category.id).in_(category_ids))):
                categories[category.id] = category.name  # type: ignore[index]
        if subcategory_ids:
            for sub in session.exec(select(Subcategory).where(col(Subcategory.id).in_(subcategory_ids))):
                subcategories[sub.id] = sub.name  # type: ignore[index]
        return categories, subcategories

    @staticmethod
    def seed_categories(session: Session, force: bool = False) -> Dict[str, Any]:
        """
        Insert the default categories and subcategories.

        Args:
            session: Database session
            force: Delete existing categories first instead of skipping

        Returns:
            Counts and whether seeding was skipped
        """
        existing = session.exec(select(func.count()).select_from(Category)).one()
        if existing and not force:
            total_subcategories = session.exec(select(func.count()).select_from(Subcategory)).one()
            logger.info(f"Categories already exist ({existing}); skipping seed")
            return {"categories": existing, "subcategories": total_subcategories, "skipped": True}

        if force:
            session.execute(delete(Subcategory))
            session.execute(delete(Category))

        created_subcategories = 0
        for order, data in enumerate(DEFAULT_CATEGORIES, start=1):
            category = Category(
                name=data["name"],
                description=data["description"],
                icon=data["icon"],
                color=data["color"],
                order=order,
            )
            session.add(category)
            session.flush()
            for sub_order, sub_name in enumerate(data["subcategories"], start=1):
                session.add(Subcategory(name=sub_name, category_id=category.id, order=sub_order))
                created_subcategories += 1

        session.commit()
        logger.info(
            f"Seeded {len(DEFAULT_CATEGORIES)} categories and {created_subcategories} subcategories"
        )
        return {
            "categories": len(DEFAULT_CATEGORIES),
            "subcategories": created_subcategories,
            "skipped": False,
        }
