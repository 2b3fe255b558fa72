"""
Error hierarchy for query resolution.

Request-level errors (``RequestError``) abort the whole query before a
response tree is produced. Resolution errors (``ResolutionError``) are
attached to the response-tree location where they occur.
"""


class MediaGraphError(Exception):
    """Base exception for all mediagraph errors."""

    code = "INTERNAL_ERROR"


class RequestError(MediaGraphError):
    """The request itself is malformed; nothing is executed."""

    pass


class InvalidArgument(RequestError):
    """A required root argument is missing or malformed."""

    code = "INVALID_ARGUMENT"

    def __init__(self, message: str, argument: str | None = None):
        super().__init__(message)
        self.argument = argument


class UnknownField(RequestError):
    """A requested field has no resolver and no matching attribute."""

    code = "UNKNOWN_FIELD"

    def __init__(self, type_name: str, field_name: str):
        super().__init__(f"Unknown field {type_name}.{field_name}")
        self.type_name = type_name
        self.field_name = field_name


class InvalidSelection(RequestError):
    """A scalar field was given a sub-selection, or an object field none."""

    code = "INVALID_SELECTION"

    def __init__(self, type_name: str, field_name: str, message: str):
        super().__init__(message)
        self.type_name = type_name
        self.field_name = field_name


class InvalidOperation(RequestError):
    """The query document has no executable query operation."""

    code = "INVALID_OPERATION"


class QuerySyntaxError(RequestError):
    """The query document could not be parsed."""

    code = "GRAPHQL_PARSE_FAILED"


class ResolutionError(MediaGraphError):
    """A data-level failure scoped to a single field."""

    pass


class NotFound(ResolutionError):
    """A keyed lookup in the static store found no match."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, id: str):
        super().__init__(f"{entity} with id '{id}' not found")
        self.entity = entity
        self.id = id


class UpstreamUnavailable(ResolutionError):
    """The remote search API could not be reached or returned garbage."""

    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
