"""Database driver adapters."""
