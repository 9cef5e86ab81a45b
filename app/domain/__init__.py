"""
Domain layer package.

Pure business logic: entities, input and filter shapes, month arithmetic,
and port interfaces. No framework imports, no IO, no side effects.
"""
