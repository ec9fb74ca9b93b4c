"""Create the brand rows the ingest profiles expect.

Usage: python backend/scripts/seed_brands.py
"""
from sqlmodel import Session

from burgerlab.core.database import engine, init_db
from burgerlab.core.logs import configure_logging
from burgerlab.seed import seed_brands


def main() -> None:
    configure_logging()
    init_db()
    with Session(engine) as s:
        created = seed_brands(s)
    print(f"Seeded {len(created)} brand(s)." if created else "All brands already present.")


if __name__ == "__main__":
    main()
