"""Domain Layer: types, contracts and events shared by the whole client.

Nothing in here performs I/O. Infrastructure adapters implement the
interfaces defined under ``domain.interfaces``.
"""
