"""
Card Checkout - demo checkout page backed by MercadoPago hosted card fields.
"""

__version__ = "0.1.0"
