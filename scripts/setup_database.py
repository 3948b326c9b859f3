#!/usr/bin/env python3
"""
Print the billing schema for the Supabase SQL editor.

Usage:
    python scripts/setup_database.py

The profiles table already exists (created by the app's auth setup);
this only adds stripe_customer_id to it.
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from nutrichef.db.schema import SCHEMA_SQL, INDEXES_SQL


def print_schema():
    """Print the schema SQL for manual execution."""
    print("=" * 60)
    print("BILLING SCHEMA")
    print("=" * 60)
    print("\nCopy and paste this SQL into Supabase SQL Editor:\n")
    print("-" * 60)
    print(SCHEMA_SQL)
    print("-" * 60)
    print("\nINDEXES:")
    print("-" * 60)
    print(INDEXES_SQL)
    print("-" * 60)


def main():
    print("NutriChef Billing - Database Setup")
    print("=" * 40)
    print()
    print("This script outputs the SQL schema for your database.")
    print("For safety, please run the SQL manually in Supabase.")
    print()

    print_schema()

    print()
    print("Next steps:")
    print("1. Go to your Supabase project dashboard")
    print("2. Open the SQL Editor")
    print("3. Paste the schema SQL above and run it")
    print("4. Fill subscription_plans.stripe_price_id from the Stripe dashboard")


if __name__ == "__main__":
    main()
