"""GraphQL error handling."""

from .plugin import GraphQLLoggerPlugin, graphql_context

__all__ = ["GraphQLLoggerPlugin", "graphql_context"]
