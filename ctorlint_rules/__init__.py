"""
Rules for the ctorlint engine.

Each module exposes a RULES list; the registry discovers them by walking
this package.
"""
