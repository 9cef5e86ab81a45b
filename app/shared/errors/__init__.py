"""
Shared error handling package.

Maps subscription domain errors to HTTP responses in one place.
"""
