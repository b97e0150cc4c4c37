"""Runtime configuration defaults for storage, checkout and identity."""

from __future__ import annotations

import os
from decimal import Decimal

DB_PATH = os.environ.get("FOOD_ORDER_DB_PATH", "data/food_order.db")
DEBUG_LOG_PATH = os.environ.get("FOOD_ORDER_DEBUG_LOG", "/tmp/food-order-debug.log")

# Storage namespaces, one logical record per store.
CART_STORAGE_KEY = "cart-storage"
ORDER_STORAGE_KEY = "order-storage"
AUTH_STORAGE_KEY = "auth-storage"
SESSION_STORAGE_KEY = "supabase-session"

STORAGE_WRITE_RETRIES = 3
STORAGE_RETRY_DELAY_SECONDS = 0.2

# Checkout fees are flat, independent of restaurant.
DELIVERY_FEE = Decimal("2.99")
SERVICE_FEE = Decimal("1.99")
ESTIMATED_DELIVERY_MINUTES = 30

SUPABASE_URL = os.environ.get("SUPABASE_URL", "https://ymljkhdpuaieivqcwrum.supabase.co")
SUPABASE_KEY = os.environ.get("SUPABASE_KEY", "")
IDENTITY_TIMEOUT_SECONDS = 10.0
