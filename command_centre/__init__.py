"""
Command Centre backend for a sole-trader photography business.

A small dashboard service that:
- Pulls business enquiries from two Gmail mailboxes and filters out noise
- Persists dashboard preferences in a remote key/value store
- Proxies bank, brokerage, stock, calendar and weather providers
"""

__version__ = "1.0.0"
