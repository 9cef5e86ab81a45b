"""
Interfaces layer package.

FastAPI routers, Pydantic request/response schemas and query parsing.
Month strings and identifiers are validated here before reaching the
service. No business logic belongs here.
"""
