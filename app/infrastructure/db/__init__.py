"""
Relational database plumbing shared by repository adapters.

Engine construction and schema migrations live here.
"""
