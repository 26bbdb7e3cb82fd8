"""
API Views for the Storefront

One module per resource: auth, catalog, cart, orders, reviews, payments,
stores and health.
"""
