"""GraphQL error logging plugin.

GraphQL executions share the HTTP exception filter, which re-raises their
errors untouched. This plugin is the single owner of GraphQL errors: it logs
and counts them once and builds the ``errors`` envelope of the response.
"""

import inspect
from collections.abc import Callable
from typing import Any

from fastapi import Request

from src.shared.errors import ArgumentsHost, ErrorDispatcher, Transport, UserFriendlyError


async def graphql_context(request: Request) -> Request:
    """FastAPI dependency marking the request as a GraphQL execution."""
    request.state.transport = Transport.GRAPHQL
    return request


class GraphQLLoggerPlugin:
    """Executes resolvers and formats their errors."""

    def __init__(self, dispatcher: ErrorDispatcher) -> None:
        self._dispatcher = dispatcher

    async def execute(
        self,
        operation: str,
        resolver: Callable[..., Any],
        *args: Any,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Run ``resolver`` for ``operation`` and build the GraphQL response.

        Returns:
            ``{"data": result}`` or ``{"data": None, "errors": [...]}``.
        """
        try:
            result = resolver(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
            return {"data": result}
        except Exception as e:
            try:
                self._dispatcher.catch(e, ArgumentsHost(Transport.GRAPHQL))
            except UserFriendlyError as error:
                return {"data": None, "errors": [self.format_error(operation, error)]}
            raise

    def format_error(self, operation: str, error: UserFriendlyError) -> dict[str, Any]:
        """Log, count and format one GraphQL error."""
        error.log("GraphQL")
        self._dispatcher.metrics.graphql.counter("error").add(
            1, {"operation": operation, "status": error.status}
        )
        return {"message": error.message, "extensions": error.to_json()}
