"""Subscriptions bounded context: HTTP interface."""
