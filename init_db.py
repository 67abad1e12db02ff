"""Initialize the database schema for the SQL recent-selection store.

Creates the ``recent_selections`` table at ``RECENT_DB_URL``.
Pass ``--reset`` to drop existing tables first.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from picker.config import settings
from picker.db import get_engine
from picker.models import Base


def init_database(reset: bool = False) -> None:
    """Create all database tables."""
    print(f"Initializing database: {settings.recent.db_url}")
    engine = get_engine()

    if reset:
        Base.metadata.drop_all(engine)
        print("✓ Dropped existing tables")

    Base.metadata.create_all(engine)
    print("✓ Created all tables")
    print(f"Tables: {', '.join(Base.metadata.tables.keys())}")


def main() -> None:
    """Main entry point."""
    try:
        init_database(reset="--reset" in sys.argv[1:])
    except Exception as e:
        print(f"\n❌ Error initializing database: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
