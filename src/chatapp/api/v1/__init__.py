# src/chatapp/api/v1/__init__.py
"""Version 1 API: REST authentication and the GraphQL endpoint."""

from .endpoints import auth_router
from .graph import graphql_router

__all__ = [
    "auth_router",
    "graphql_router",
]
