"""External adapters for the shopcast notification system.

This package contains all external dependencies (Discord, HTTP servers,
etc.) and provides implementations of the core port interfaces.

Adapter Organization:

- notification/: Adapters for delivering notifications (Discord, stdout)
- webhook/: HTTP webhook receiver for inbound shop-management events
"""
