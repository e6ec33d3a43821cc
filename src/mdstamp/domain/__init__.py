"""Domain layer: document tree, field specs and frontmatter codecs.

This layer depends only on stdlib and the YAML/TOML libraries.
It must never import from services, infrastructure, commands, or config.
"""
