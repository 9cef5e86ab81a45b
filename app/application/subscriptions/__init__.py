"""Subscriptions bounded context: application layer."""
