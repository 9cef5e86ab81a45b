"""
Infrastructure layer package.

Concrete adapters for the ports defined in the domain layer:
relational and in-memory subscription stores, plus database plumbing.
"""
