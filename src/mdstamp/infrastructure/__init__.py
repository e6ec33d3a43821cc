"""Infrastructure layer: git subprocess queries and document file I/O.

This layer depends on stdlib and the domain layer.
It must never import from services, commands, or output.
"""
