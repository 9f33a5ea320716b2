"""
One-time database initialization: tables, default categories and the
default admin account.

Usage:
    python -m app.db.init_db            # seed if empty
    python -m app.db.init_db --force    # replace existing categories
"""

import argparse
from typing import Any, Dict, Optional

from sqlmodel import Session

from app.core.logging import get_logger, setup_logging
from app.db.session import create_db_and_tables, engine
from app.services.account_service import AccountService
from app.services.category_service import CategoryService

logger = get_logger(__name__)


def init_db(session: Session, force: bool = False) -> Dict[str, Any]:
    """
    Seed categories and bootstrap the default admin.

    Safe to run repeatedly: categories are skipped when present (unless
    ``force``) and the admin is only created when its email is absent.

    Returns:
        Seeding counts and the default admin email, if one exists
    """
    seeded = CategoryService.seed_categories(session, force=force)
    admin = AccountService.ensure_default_admin(session)
    return {**seeded, "default_admin": admin.email if admin else None}


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="Initialize the feedback database")
    parser.add_argument("--force", action="store_true", help="Replace existing categories")
    args = parser.parse_args(argv)

    setup_logging()
    create_db_and_tables()
    with Session(engine) as session:
        result = init_db(session, force=args.force)
    logger.info(f"Database initialized: {result}")


if __name__ == "__main__":
    main()
