"""Errors raised while generating Zapier actions from a GraphQL schema.

Every error aborts the current generation request. None of them is caught inside the
resolvers, builders or synthesizers; the CLI reports them and exits.
"""


class ZapierGraphQLError(ValueError):
    """Base class for all zapier-graphql errors."""


class UnmappedScalarTypeError(ZapierGraphQLError):
    """Raised when a GraphQL scalar has no entry in the configured scalar map.

    There is no implicit fallback: the scalar must be added to ``scalarMap`` in the
    project configuration.
    """

    def __init__(self, type_name: str, field_name: str | None = None) -> None:
        self.type_name = type_name
        self.field_name = field_name
        location = f' on field "{field_name}"' if field_name else ""
        super().__init__(f'Unable to determine scalar type for "{type_name}"{location}, add it to the scalarMap')


class UnresolvedTypeError(ZapierGraphQLError):
    """Raised when unwrapping a type does not end on a usable named type."""

    def __init__(self, type_name: str | None, field_name: str | None = None) -> None:
        self.type_name = type_name
        self.field_name = field_name
        location = f' for field "{field_name}"' if field_name else ""
        super().__init__(f'Unable to determine type details of "{type_name}"{location}')


class InvalidOperationKindError(ZapierGraphQLError):
    """Raised when a document is requested for something other than a query or mutation."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Must be 'query' or 'mutation', not \"{kind}\"")


class UnsupportedSampleTypeError(ZapierGraphQLError):
    """Raised when a field carries a platform type without a sample value rule."""

    def __init__(self, field_key: str, field_type: str | None) -> None:
        self.field_key = field_key
        self.field_type = field_type
        super().__init__(f'Unable to create sample data for "{field_key}" field of type "{field_type}"')


class MissingArgumentsError(ZapierGraphQLError):
    """Raised when a search action is requested for a query without arguments."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f'Unable to add "{operation}" search query, it must have at least one argument')


class InvalidActionError(ZapierGraphQLError):
    """Raised for an action other than trigger, search or create."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Must be 'trigger', 'search', or 'create', not \"{action}\"")


class OperationNotFoundError(ZapierGraphQLError):
    """Raised when a query or mutation does not exist in the schema."""

    def __init__(self, kind: str, operation: str) -> None:
        self.kind = kind
        self.operation = operation
        super().__init__(f'{kind.capitalize()} "{operation}" does not exist')


class ConfigNotFoundError(ZapierGraphQLError):
    """Raised when the project has no .zapiergraphql configuration file."""


class SchemaFetchError(ZapierGraphQLError):
    """Raised when the schema cannot be fetched through introspection."""


class EntryFileError(ZapierGraphQLError):
    """Raised when the host project's entry file cannot be updated."""
