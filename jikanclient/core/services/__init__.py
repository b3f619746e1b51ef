"""Endpoint wrappers. Each builds a path and query and delegates to the fetch helpers."""
