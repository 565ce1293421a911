"""Storefront-wide constants.

Centralizes storage keys and money rules used by the cart engine.
"""

# ============== STORAGE KEYS ==============
CART_STORAGE_KEY = "smartblinds_cart"
SAVED_CARTS_STORAGE_KEY = "smartblinds_saved_carts"
SAVED_ITEMS_STORAGE_KEY = "smartblinds_saved_items"

DEFAULT_PROFILE = "default"

# ============== CHANGE CHANNELS ==============
CART_UPDATED = "cartUpdated"
SAVED_ITEMS_UPDATED = "savedItemsUpdated"
SAVED_CARTS_UPDATED = "savedCartsUpdated"

# ============== CART TOTALS ==============
DEFAULT_TAX_RATE = 0.07  # 7%
FREE_SHIPPING_THRESHOLD = 100.0
FLAT_SHIPPING_RATE = 9.99

# ============== CATALOG DEFAULTS ==============
DEFAULT_PRODUCT_BASE_PRICE = 79.99
DEFAULT_WIDTH = 24  # inches
DEFAULT_HEIGHT = 36  # inches

MIN_QUANTITY = 1

CURRENCY_SYMBOL = "$"
MONEY_DECIMALS = 2
