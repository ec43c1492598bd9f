"""Weather Monitor API: weather lookups with per-user search history."""

__version__ = "1.0.0"
