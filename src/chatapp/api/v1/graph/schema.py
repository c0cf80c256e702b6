# src/chatapp/api/v1/graph/schema.py
"""Strawberry schema and the FastAPI router serving it."""

import logging

import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter

from chatapp.core.errors import GENERIC_ERROR_MESSAGE, ChatAppError, UpstreamFailure

from .context import get_context
from .resolvers import Mutation, Query

logger = logging.getLogger(__name__)


def should_mask_error(error: GraphQLError) -> bool:
    """Mask anything raised by a resolver that is not a domain error.

    Errors without an original exception come from GraphQL parsing and
    validation and are shown as-is.
    """
    original = error.original_error
    if original is None:
        return False
    if isinstance(original, UpstreamFailure):
        logger.error("Media host failure at %s: %s", error.path, original.detail)
        return False
    if isinstance(original, ChatAppError):
        return False
    logger.error(
        "Unhandled error in resolver at %s",
        error.path,
        exc_info=(type(original), original, original.__traceback__),
    )
    return True


schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    extensions=[
        lambda: MaskErrors(
            should_mask_error=should_mask_error, error_message=GENERIC_ERROR_MESSAGE
        ),
    ],
)

graphql_router: GraphQLRouter = GraphQLRouter(
    schema,
    context_getter=get_context,
    multipart_uploads_enabled=True,
)
