"""CharterBox - booking import and reconciliation service for yacht charters."""

__version__ = "0.4.0"
