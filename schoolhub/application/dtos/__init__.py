"""Application DTOs (frozen dataclasses, no dependency on the ORM)."""
