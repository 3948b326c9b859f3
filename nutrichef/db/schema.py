"""
Billing tables for NutriChef.
Designed for Supabase (Postgres) with Row Level Security.

Tables:
- subscription_plans: Read-only plan catalog (price, features, Stripe price)
- user_subscriptions: Local mirror of each user's Stripe subscription
- profiles: Existing auth profile table; we only add stripe_customer_id

Key design decisions:
1. Stripe is the source of truth; rows are written only by webhooks
2. Rows are never deleted here, only moved to cancelled/expired
3. The "current" subscription is the newest row per user
   (created_at DESC, then id DESC)
"""

SCHEMA_SQL = """
-- Enable UUID extension
CREATE EXTENSION IF NOT EXISTS "uuid-ossp";

-- Subscription plans
-- Catalog of purchasable tiers, maintained by hand
CREATE TABLE IF NOT EXISTS subscription_plans (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    name TEXT NOT NULL,
    description TEXT,
    price NUMERIC(10, 2) NOT NULL,
    currency TEXT NOT NULL DEFAULT 'BRL',
    billing_period TEXT NOT NULL DEFAULT 'monthly',
    features TEXT[] NOT NULL DEFAULT '{}',
    stripe_product_id TEXT,
    stripe_price_id TEXT UNIQUE,
    is_active BOOLEAN DEFAULT TRUE,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);

-- User subscriptions
-- Mirrors Stripe billing state, one lineage per user
CREATE TABLE IF NOT EXISTS user_subscriptions (
    id UUID PRIMARY KEY DEFAULT uuid_generate_v4(),
    user_id UUID REFERENCES auth.users(id) ON DELETE CASCADE NOT NULL,
    plan_id UUID REFERENCES subscription_plans(id),
    status TEXT NOT NULL DEFAULT 'pending' CHECK (
        status IN ('active', 'cancelled', 'expired', 'pending')
    ),
    started_at TIMESTAMPTZ DEFAULT NOW(),
    expires_at TIMESTAMPTZ,
    auto_renew BOOLEAN DEFAULT TRUE,
    payment_method TEXT,
    stripe_subscription_id TEXT,
    created_at TIMESTAMPTZ DEFAULT NOW(),
    updated_at TIMESTAMPTZ DEFAULT NOW()
);

-- Customer mapping lives on the profile
ALTER TABLE profiles ADD COLUMN IF NOT EXISTS stripe_customer_id TEXT UNIQUE;

-- Row Level Security (RLS) policies
-- Users read their own subscription; only the service role writes

ALTER TABLE subscription_plans ENABLE ROW LEVEL SECURITY;
ALTER TABLE user_subscriptions ENABLE ROW LEVEL SECURITY;

-- Plans: readable by everyone while active
CREATE POLICY plans_select_active ON subscription_plans
    FOR SELECT USING (is_active = TRUE);

-- Subscriptions: users can read their own
CREATE POLICY subscriptions_select_own ON user_subscriptions
    FOR SELECT USING (auth.uid() = user_id);
"""

INDEXES_SQL = """
-- Performance indexes
CREATE INDEX IF NOT EXISTS idx_plans_stripe_price ON subscription_plans(stripe_price_id);
CREATE INDEX IF NOT EXISTS idx_plans_active ON subscription_plans(is_active) WHERE is_active = TRUE;

CREATE INDEX IF NOT EXISTS idx_subscriptions_user ON user_subscriptions(user_id);
CREATE INDEX IF NOT EXISTS idx_subscriptions_user_created ON user_subscriptions(user_id, created_at DESC);
CREATE INDEX IF NOT EXISTS idx_subscriptions_stripe_id ON user_subscriptions(stripe_subscription_id);

CREATE INDEX IF NOT EXISTS idx_profiles_stripe_customer ON profiles(stripe_customer_id);
"""
