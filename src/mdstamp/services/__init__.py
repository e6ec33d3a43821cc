"""Service layer: time resolution, field evaluation, merging and stamping.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
