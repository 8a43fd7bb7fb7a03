"""Persistence tiers for the registry.

``PostgresMirror`` imports psycopg lazily and is imported from
``registry_sync.sinks.postgres`` directly.
"""

from registry_sync.sinks.local import LocalStore

__all__ = ["LocalStore"]
