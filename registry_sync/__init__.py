"""Registry synchronization and import engine."""

__version__ = "0.1.0"
