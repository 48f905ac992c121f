"""Rendered scene construction and caching."""
