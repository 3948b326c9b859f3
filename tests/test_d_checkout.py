#!/usr/bin/env python3
"""
Test D: Checkout Session + Customer Mapping

Validates:
1. Neither priceId nor planId -> MissingParameters, no Stripe call
2. Plans without a Stripe price are not purchasable
3. planId resolves to the plan's Stripe price; priceId wins when both given
4. The Stripe customer is created once per user and then reused
5. Checkout never writes a subscription row

Stripe calls are patched; the database is the in-memory fake.
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
import stripe

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from nutrichef.core.errors import ConfigurationError, MissingParameters, PlanNotPurchasable
from nutrichef.lib import CheckoutService, CustomerResolver

from fakes import FakeSupabase


USER = {"id": "U1", "email": "ana@example.com"}


@pytest.fixture(autouse=True)
def stripe_env(monkeypatch):
    monkeypatch.setenv("STRIPE_SECRET_KEY", "sk_test_123")
    monkeypatch.setenv("FRONTEND_URL", "https://nutrichef.app/")


@pytest.fixture
def db():
    store = FakeSupabase()
    store.add_plan("P1", "price_A")
    store.add_plan("P_FREE", None, price=0)
    store.add_profile("U1", "ana@example.com")
    return store


@pytest.fixture
def stripe_calls():
    session = SimpleNamespace(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")
    customer = SimpleNamespace(id="cus_new")
    with patch.object(stripe.checkout.Session, "create", return_value=session) as create_session, \
            patch.object(stripe.Customer, "create", return_value=customer) as create_customer:
        yield SimpleNamespace(session=create_session, customer=create_customer)


def test_missing_price_and_plan_creates_no_session(db, stripe_calls):
    with pytest.raises(MissingParameters):
        CheckoutService(db).create_checkout_session(USER)

    stripe_calls.session.assert_not_called()
    stripe_calls.customer.assert_not_called()


def test_unknown_plan_is_not_purchasable(db, stripe_calls):
    with pytest.raises(PlanNotPurchasable):
        CheckoutService(db).create_checkout_session(USER, plan_id="P_MISSING")

    stripe_calls.session.assert_not_called()


def test_plan_without_stripe_price_is_not_purchasable(db, stripe_calls):
    with pytest.raises(PlanNotPurchasable):
        CheckoutService(db).create_checkout_session(USER, plan_id="P_FREE")


def test_plan_resolves_to_stripe_price(db, stripe_calls):
    url = CheckoutService(db).create_checkout_session(USER, plan_id="P1")

    assert url == "https://checkout.stripe.com/c/pay/cs_test_1"
    kwargs = stripe_calls.session.call_args.kwargs
    assert kwargs["mode"] == "subscription"
    assert kwargs["customer"] == "cus_new"
    assert kwargs["line_items"] == [{"price": "price_A", "quantity": 1}]
    assert kwargs["metadata"] == {"user_id": "U1", "price_id": "price_A"}
    assert kwargs["subscription_data"] == {"metadata": {"user_id": "U1"}}


def test_explicit_price_wins_over_plan(db, stripe_calls):
    CheckoutService(db).create_checkout_session(USER, price_id="price_direct", plan_id="P1")

    assert stripe_calls.session.call_args.kwargs["line_items"][0]["price"] == "price_direct"


def test_default_redirect_urls_use_frontend_url(db, stripe_calls):
    CheckoutService(db).create_checkout_session(USER, price_id="price_A")

    kwargs = stripe_calls.session.call_args.kwargs
    assert kwargs["success_url"] == "https://nutrichef.app/assinatura/sucesso"
    assert kwargs["cancel_url"] == "https://nutrichef.app/assinatura/cancelada"


def test_caller_redirect_urls_are_kept(db, stripe_calls):
    CheckoutService(db).create_checkout_session(
        USER,
        price_id="price_A",
        success_url="https://nutrichef.app/ok",
        cancel_url="https://nutrichef.app/nope",
    )

    kwargs = stripe_calls.session.call_args.kwargs
    assert kwargs["success_url"] == "https://nutrichef.app/ok"
    assert kwargs["cancel_url"] == "https://nutrichef.app/nope"


def test_checkout_writes_no_subscription_row(db, stripe_calls):
    CheckoutService(db).create_checkout_session(USER, plan_id="P1")

    assert db.rows("user_subscriptions") == []


def test_missing_stripe_key_fails_fast(db, stripe_calls, monkeypatch):
    monkeypatch.delenv("STRIPE_SECRET_KEY")

    with pytest.raises(ConfigurationError) as exc_info:
        CheckoutService(db).create_checkout_session(USER, price_id="price_A")

    assert exc_info.value.variable == "STRIPE_SECRET_KEY"
    stripe_calls.session.assert_not_called()


# =============================================================================
# Customer mapping
# =============================================================================

def test_customer_created_once_then_reused(db, stripe_calls):
    resolver = CustomerResolver(db)

    first = resolver.ensure_customer("U1", "ana@example.com")
    second = resolver.ensure_customer("U1", "ana@example.com")

    assert first == second == "cus_new"
    stripe_calls.customer.assert_called_once_with(
        email="ana@example.com", metadata={"user_id": "U1"}
    )
    assert db.rows("profiles")[0]["stripe_customer_id"] == "cus_new"


def test_existing_customer_is_not_recreated(db, stripe_calls):
    db.tables["profiles"][0]["stripe_customer_id"] = "cus_existing"

    CheckoutService(db).create_checkout_session(USER, price_id="price_A")

    stripe_calls.customer.assert_not_called()
    assert stripe_calls.session.call_args.kwargs["customer"] == "cus_existing"


def test_reverse_lookup(db):
    db.tables["profiles"][0]["stripe_customer_id"] = "cus_existing"
    resolver = CustomerResolver(db)

    assert resolver.lookup_user_by_customer("cus_existing") == "U1"
    assert resolver.lookup_user_by_customer("cus_unknown") is None
    assert resolver.lookup_user_by_customer(None) is None


if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-v"]))
