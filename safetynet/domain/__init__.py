"""Domain entities and pure helpers (no storage, no HTTP)."""
