#!/usr/bin/env python3
"""
Admin utilities for the NutriChef billing tables.

Commands:
    python scripts/admin.py stats                 - Subscription counts by status
    python scripts/admin.py plans                 - List the plan catalog
    python scripts/admin.py subscriptions USER_ID - Subscription rows for a user
    python scripts/admin.py customer USER_ID      - Show a user's Stripe customer
    python scripts/admin.py replay EVENT.json     - Re-apply a saved Stripe event
"""

import argparse
import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

from nutrichef.core.logging_config import setup_logging
from nutrichef.db import get_admin_client
from nutrichef.lib import CustomerResolver, EventRouter, SubscriptionService
from nutrichef.models import SubscriptionStatus


def cmd_stats(client, args):
    """Show subscription statistics."""
    print("\n📊 Subscription Statistics")
    print("=" * 40)

    total = client.table("user_subscriptions").select("id", count="exact").execute()
    print(f"Subscription rows: {total.count or 0}")

    for status in SubscriptionStatus:
        result = (
            client.table("user_subscriptions")
            .select("id", count="exact")
            .eq("status", status.value)
            .execute()
        )
        print(f"  {status.value:10} {result.count or 0}")

    customers = (
        client.table("profiles")
        .select("id", count="exact")
        .not_.is_("stripe_customer_id", "null")
        .execute()
    )
    print(f"Profiles with Stripe customer: {customers.count or 0}")


def cmd_plans(client, args):
    """List the plan catalog, including inactive plans."""
    print("\n💳 Plans")
    print("=" * 70)

    result = client.table("subscription_plans").select("*").order("price").execute()

    for plan in result.data or []:
        flag = "active" if plan.get("is_active") else "off"
        price_id = plan.get("stripe_price_id") or "(no Stripe price)"
        print(
            f"  [{flag:6}] {plan['name'][:20]:20} "
            f"{plan['price']:>8} {plan.get('currency', ''):4} {price_id}"
        )
        print(f"           features: {', '.join(plan.get('features') or [])}")


def cmd_subscriptions(client, args):
    """Show every subscription row of a user, newest first."""
    service = SubscriptionService(client)
    current = service.get_current_row(args.user_id)

    result = (
        client.table("user_subscriptions")
        .select("*")
        .eq("user_id", args.user_id)
        .order("created_at", desc=True)
        .execute()
    )

    print(f"\n📄 Subscriptions for {args.user_id}")
    print("=" * 70)

    for row in result.data or []:
        marker = "*" if current and row["id"] == current["id"] else " "
        created = (row.get("created_at") or "")[:19]
        print(
            f" {marker} [{row['status']:9}] {row.get('stripe_subscription_id') or '-':30} "
            f"plan={row.get('plan_id') or '-'} ({created})"
        )

    if not result.data:
        print("  (none)")
    elif len(result.data) > 1:
        print("\n  * = current row (newest created_at)")


def cmd_customer(client, args):
    """Show the Stripe customer mapped to a user."""
    customer_id = CustomerResolver(client).get_customer_id(args.user_id)
    if customer_id:
        print(f"✓ {args.user_id} -> {customer_id}")
    else:
        print(f"✗ {args.user_id} has no Stripe customer yet")


def cmd_replay(client, args):
    """
    Re-apply a Stripe event saved from the dashboard.
    Signature is not checked - only use with events you fetched yourself.
    """
    event = json.loads(Path(args.event_file).read_text())
    outcome = EventRouter(SubscriptionService(client)).dispatch(event)
    print(f"✓ {event.get('type')} {event.get('id')}: {outcome}")


def main():
    parser = argparse.ArgumentParser(description="Admin utilities")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    subparsers.add_parser("stats", help="Show subscription statistics")
    subparsers.add_parser("plans", help="List plans")

    subs_parser = subparsers.add_parser("subscriptions", help="Show a user's subscription rows")
    subs_parser.add_argument("user_id", help="Supabase user ID")

    customer_parser = subparsers.add_parser("customer", help="Show a user's Stripe customer")
    customer_parser.add_argument("user_id", help="Supabase user ID")

    replay_parser = subparsers.add_parser("replay", help="Re-apply a saved Stripe event")
    replay_parser.add_argument("event_file", help="Path to event JSON")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    load_dotenv()
    setup_logging("INFO")
    client = get_admin_client()

    commands = {
        "stats": cmd_stats,
        "plans": cmd_plans,
        "subscriptions": cmd_subscriptions,
        "customer": cmd_customer,
        "replay": cmd_replay,
    }

    commands[args.command](client, args)


if __name__ == "__main__":
    main()
