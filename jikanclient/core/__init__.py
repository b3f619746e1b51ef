"""Core Application Layer: the public client and its endpoint services.

Connects callers with the dispatch pipeline through thin, typed fetch
helpers.
"""
