"""Storefront client.

Cart and checkout business logic for a storefront backed by a remote
catalog/cart/order service, plus thin services for catalog browsing,
address management and authentication.
"""

__version__ = "0.1.0"
