# src/chatapp/api/v1/graph/__init__.py
"""GraphQL surface: schema, resolvers and response mapping."""

from .schema import graphql_router, schema

__all__ = ["graphql_router", "schema"]
