"""
In-memory stand-ins for Supabase and Stripe signing, shared by the tests.

FakeSupabase implements the slice of the PostgREST table builder the app
uses: select / insert / update, eq, order, limit, execute. Every write is
recorded in `writes` so tests can assert "no mutation happened".
"""

import hashlib
import hmac
import json
import time
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from typing import Optional


WEBHOOK_SECRET = "whsec_test_secret"

BASE_TIME = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.op = "select"
        self.values = None
        self.filters = []
        self.order_by = None
        self.row_limit = None

    def select(self, columns: str = "*", count: Optional[str] = None):
        self.op = "select"
        return self

    def insert(self, values: dict):
        self.op = "insert"
        self.values = values
        return self

    def update(self, values: dict):
        self.op = "update"
        self.values = values
        return self

    def eq(self, column: str, value):
        self.filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False):
        self.order_by = (column, desc)
        return self

    def limit(self, size: int):
        self.row_limit = size
        return self

    def _matches(self, row: dict) -> bool:
        return all(row.get(column) == value for column, value in self.filters)

    def execute(self) -> FakeResponse:
        if self.table in self.db.failing_tables:
            raise RuntimeError(f"connection reset while querying {self.table}")

        rows = self.db.tables.setdefault(self.table, [])

        if self.op == "insert":
            row = dict(self.values)
            row.setdefault("id", self.db.next_id())
            row.setdefault("created_at", self.db.next_timestamp())
            rows.append(row)
            self.db.writes.append(("insert", self.table, dict(row)))
            return FakeResponse([dict(row)])

        matched = [row for row in rows if self._matches(row)]

        if self.op == "update":
            for row in matched:
                row.update(self.values)
                self.db.writes.append(("update", self.table, dict(row)))
            return FakeResponse([dict(row) for row in matched])

        if self.order_by:
            column, desc = self.order_by
            matched = sorted(matched, key=lambda row: row.get(column), reverse=desc)
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        return FakeResponse([dict(row) for row in matched], count=len(matched))


class FakeAuth:
    def __init__(self):
        self.tokens = {}

    def get_user(self, token: str):
        if token not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        user_id, email = self.tokens[token]
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=email))


class FakeSupabase:
    """Dict-of-lists database with a Supabase-shaped client API."""

    def __init__(self):
        self.tables = {}
        self.writes = []
        self.failing_tables = set()
        self.auth = FakeAuth()
        self._ids = 0
        self._ticks = 0

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def next_id(self) -> str:
        self._ids += 1
        return f"row-{self._ids:04d}"

    def next_timestamp(self) -> str:
        self._ticks += 1
        return (BASE_TIME + timedelta(seconds=self._ticks)).isoformat()

    def rows(self, table: str) -> list:
        return [dict(row) for row in self.tables.get(table, [])]

    # -- Seed helpers --------------------------------------------------

    def add_plan(self, plan_id: str, stripe_price_id: Optional[str], price: float = 29.9,
                 features=("ai_mentoring",), is_active: bool = True) -> dict:
        plan = {
            "id": plan_id,
            "name": f"Plan {plan_id}",
            "description": None,
            "price": price,
            "currency": "BRL",
            "billing_period": "monthly",
            "features": list(features),
            "stripe_price_id": stripe_price_id,
            "is_active": is_active,
        }
        self.tables.setdefault("subscription_plans", []).append(plan)
        return plan

    def add_profile(self, user_id: str, email: str, stripe_customer_id: Optional[str] = None) -> dict:
        profile = {"id": user_id, "email": email, "stripe_customer_id": stripe_customer_id}
        self.tables.setdefault("profiles", []).append(profile)
        return profile

    def add_subscription(self, **fields) -> dict:
        row = dict(fields)
        row.setdefault("id", self.next_id())
        row.setdefault("created_at", self.next_timestamp())
        row.setdefault("status", "active")
        self.tables.setdefault("user_subscriptions", []).append(row)
        return row


def fixed_clock(moment: datetime = BASE_TIME + timedelta(days=1)):
    return lambda: moment


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: Optional[int] = None) -> str:
    """Build a Stripe-Signature header the way Stripe does."""
    timestamp = int(time.time()) if timestamp is None else timestamp
    signed = f"{timestamp}.".encode("utf-8") + payload
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def make_event(event_type: str, obj: dict, event_id: str = "evt_test_1") -> dict:
    return {
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": obj},
    }


def encode_event(event: dict) -> bytes:
    return json.dumps(event, separators=(",", ":")).encode("utf-8")


def checkout_completed(user_id: Optional[str], subscription_id: str = "sub_1",
                       customer_id: str = "cus_1", price_id: Optional[str] = "price_A") -> dict:
    metadata = {}
    if user_id:
        metadata["user_id"] = user_id
    if price_id:
        metadata["price_id"] = price_id
    return make_event("checkout.session.completed", {
        "id": "cs_test_1",
        "object": "checkout.session",
        "mode": "subscription",
        "customer": customer_id,
        "subscription": subscription_id,
        "metadata": metadata,
    })


def subscription_event(event_type: str, subscription_id: str = "sub_1", customer_id: str = "cus_1",
                       user_id: Optional[str] = None, price_id: Optional[str] = "price_A") -> dict:
    items = {"object": "list", "data": []}
    if price_id:
        items["data"].append({"id": "si_1", "price": {"id": price_id}})
    return make_event(event_type, {
        "id": subscription_id,
        "object": "subscription",
        "customer": customer_id,
        "status": "active",
        "metadata": {"user_id": user_id} if user_id else {},
        "items": items,
    })
