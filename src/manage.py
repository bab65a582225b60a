"""MerchFlow management CLI.

Creates and drops the database schema and loads demo data.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
    python src/manage.py seed       # Load demo users, products and orders
"""

import argparse
import sys


def _domain():
    from merchflow.domain import merchflow

    print("Initializing merchflow domain...")
    merchflow.init()
    return merchflow


def setup_database():
    """Create the database schema."""
    from merchflow.utils.db import setup_db

    domain = _domain()
    print("Creating merchflow database schema...")
    setup_db(domain)
    print("Done.")


def drop_database():
    """Drop the database schema."""
    from merchflow.utils.db import drop_db

    domain = _domain()
    print("Dropping merchflow database schema...")
    drop_db(domain)
    print("Done.")


def seed_database():
    """Load the demo data set."""
    from merchflow.seed import seed

    domain = _domain()
    with domain.domain_context():
        result = seed()
    print(
        f"Seeded {len(result['users'])} users, {len(result['products'])} products, {len(result['orders'])} new orders."
    )


def main():
    parser = argparse.ArgumentParser(description="MerchFlow database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    subparsers.add_parser("seed", help="Load demo users, products and orders")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed":
        seed_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
