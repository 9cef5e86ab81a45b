"""Subscriptions bounded context: infrastructure adapters."""
