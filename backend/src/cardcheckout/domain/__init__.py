"""
Domain package - Checkout rules with no external dependencies.

Tax-id formatting, gateway error translation and the browser form state
live here as pure Python so the page script and the server agree on them.
"""
