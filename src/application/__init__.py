"""
Application layer - Use cases and DTOs.

This layer orchestrates business logic by:
1. Defining request/response DTOs for API contracts
2. Implementing use cases that coordinate core services

Single-resource CRUD goes straight to the core services; flows that span
resources or external systems are use cases.
"""

from src.application import dto, use_cases

__all__ = ["dto", "use_cases"]
