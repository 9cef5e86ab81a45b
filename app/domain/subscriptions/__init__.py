"""
Subscriptions bounded context: domain layer.

This module contains all domain logic for the subscriptions context:
- Subscription records and their month ranges
- Input and filter shapes for CRUD and queries
- Month arithmetic used by cost aggregation
"""
