#!/usr/bin/env python
"""
Create the customers table (if missing) and optionally seed demo customers.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --seed 25

Environment:
    DATABASE_URL: SQLAlchemy URL (defaults to sqlite:///customers.db)

Production schemas are managed by Alembic (scripts/release.py); create_all here
is a convenience for local SQLite databases.
"""
from __future__ import annotations

import argparse
import os
import random
import sys
from pathlib import Path

# Ensure repo root is on sys.path when running as a script (Windows-friendly).
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from app.crm.models import Base
from app.crm.modules.customers.service import DuplicateEmail, create_customer

FIRST_NAMES = ("John", "Jane", "Alice", "Bob", "Priya", "Carlos", "Mei", "Omar", "Sara", "Liam")
LAST_NAMES = ("Doe", "Smith", "Brown", "Patel", "Garcia", "Chen", "Haddad", "Jones", "Nguyen", "Walker")
DEMO_HOBBIES = ("Reading", "Gaming", "Sports", "Cooking", "Traveling")


def demo_customer_payload(rng: random.Random, n: int) -> dict:
    """One valid customer payload; `n` keeps the email unique within a run."""
    first = rng.choice(FIRST_NAMES)
    last = rng.choice(LAST_NAMES)
    return {
        "firstname": first,
        "lastname": last,
        "email": f"{first}.{last}.{n}@example.com".lower(),
        "mobile": "".join(rng.choice("0123456789") for _ in range(10)),
        "gender": rng.choice(("male", "female")),
        "address": f"{rng.randint(1, 999)} Example Street",
        "hobbies": rng.sample(DEMO_HOBBIES, rng.randint(0, 3)),
    }


def seed_demo_customers(s: Session, count: int, *, seed: int | None = None) -> int:
    """
    Insert `count` demo customers. Emails already present are skipped.
    Returns the number of customers created.
    """
    rng = random.Random(seed)
    created = 0
    for n in range(1, count + 1):
        try:
            create_customer(s, demo_customer_payload(rng, n))
        except DuplicateEmail:
            continue
        s.commit()
        created += 1
    return created


def init_db(*, database_url: str | None = None, seed: int = 0) -> None:
    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///customers.db").strip()

    engine = create_engine(db_url, future=True, pool_pre_ping=True)
    try:
        Base.metadata.create_all(bind=engine)
        print("Initialized database (create_all).")

        if seed > 0:
            with Session(engine, expire_on_commit=False) as s:
                created = seed_demo_customers(s, seed)
            print(f"Seeded {created} demo customer(s).")
    finally:
        engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create tables and optionally seed demo customers.")
    parser.add_argument("--seed", type=int, default=0, help="Number of demo customers to insert")
    parser.add_argument("--database-url", default=None, help="Overrides DATABASE_URL")
    args = parser.parse_args()
    init_db(database_url=args.database_url, seed=args.seed)


if __name__ == "__main__":
    main()
