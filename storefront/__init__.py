"""Cart and pricing engine for the made-to-order blinds storefront."""

__version__ = "0.1.0"
