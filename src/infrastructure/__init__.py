"""Infrastructure layer implementations."""

from src.infrastructure import identity, pdf, storage

__all__ = ["storage", "identity", "pdf"]
