"""
Configuration management.

Typed defaults, YAML overrides and request parameter coercion.
"""
