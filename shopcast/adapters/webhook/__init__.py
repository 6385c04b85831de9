"""Webhook receiver adapters.

Provides the HTTP endpoint shop-management systems deliver events to.
"""
