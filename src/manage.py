"""Storefront database management CLI.

Usage:
    python src/manage.py setup-db                      # Create all tables
    python src/manage.py drop-db                       # Drop all tables
    python src/manage.py seed-demo --output seed.json  # Demo catalog for load tests
"""

import argparse
import json
import sys


def setup_database():
    """Create the storefront schema in every SQL provider."""
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating storefront database schema...")
    providers = setup_db(storefront)
    if providers:
        print(f"  schema ready on: {', '.join(providers)}")
    else:
        print("  no SQL providers configured; nothing to create.")
    print("Done.")


def drop_database():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping storefront database schema...")
    providers = drop_db(storefront)
    if providers:
        print(f"  schema dropped on: {', '.join(providers)}")
    else:
        print("  no SQL providers configured; nothing to drop.")
    print("Done.")


def seed_demo(output, products, customers, scarce_stock):
    """Create a demo catalog, customers and a promo code; write their ids as JSON."""
    from protean import current_domain
    from storefront.catalog.management import AddProduct
    from storefront.domain import storefront
    from storefront.loyalty.management import RegisterCustomer
    from storefront.promotions.management import CreatePromotionCode

    print("Initializing storefront domain...")
    storefront.init()

    with storefront.domain_context():
        product_ids = [
            current_domain.process(
                AddProduct(name=f"Demo product {n}", price=float(100 * n), stock_count=10_000),
                asynchronous=False,
            )
            for n in range(1, products + 1)
        ]
        scarce_product_id = current_domain.process(
            AddProduct(name="Limited edition", price=990.0, stock_count=scarce_stock),
            asynchronous=False,
        )
        customer_ids = [
            current_domain.process(
                RegisterCustomer(name=f"Demo customer {n}", loyalty_balance=500),
                asynchronous=False,
            )
            for n in range(1, customers + 1)
        ]
        current_domain.process(
            CreatePromotionCode(code="LOADTEST10", discount_percent=10.0, min_order_amount=500.0),
            asynchronous=False,
        )

    seed = {
        "product_ids": product_ids,
        "scarce_product_id": scarce_product_id,
        "customer_ids": customer_ids,
        "promo_code": "LOADTEST10",
    }
    with open(output, "w") as fh:
        json.dump(seed, fh, indent=2)
    print(f"Seeded {products} products, {customers} customers; ids written to {output}")


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    seed_parser = subparsers.add_parser("seed-demo", help="Seed demo data for load tests")
    seed_parser.add_argument("--output", default="loadtests/seed.json")
    seed_parser.add_argument("--products", type=int, default=20)
    seed_parser.add_argument("--customers", type=int, default=50)
    seed_parser.add_argument("--scarce-stock", type=int, default=5)

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "seed-demo":
        seed_demo(args.output, args.products, args.customers, args.scarce_stock)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
