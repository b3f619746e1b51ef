"""Domain Event definitions.

Represents significant occurrences in the life of an API call (deferred,
retried, served from cache...) that callers may observe.
"""
