"""
Application layer package.

Services that orchestrate domain logic over the ports.
This layer depends on domain ports, never on infrastructure.
"""
