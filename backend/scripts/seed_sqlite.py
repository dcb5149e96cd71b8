"""
Build a local SQLite reporting database filled with demo data.
Run from backend/: python scripts/seed_sqlite.py [path/to/smartour_demo.db]
Then start the API with DATABASE_URL=sqlite:///./smartour_demo.db
"""

import os
import sys

# Add backend directory to path for smartour imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smartour.db.models import Base
from smartour.db.seed import seed_demo


def main():
    default_path = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "smartour_demo.db")
    db_path = sys.argv[1] if len(sys.argv) > 1 else default_path
    print(f"Database: {db_path}")

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Recreate all tables
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    print("Tables created")

    session = sessionmaker(bind=engine)()
    try:
        created = seed_demo(session)
    finally:
        session.close()

    print(f"Inserted {created} reservations")
    print("\nDone.")


if __name__ == "__main__":
    main()
