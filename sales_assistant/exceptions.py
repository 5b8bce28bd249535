"""Domain errors raised by the chat service and its collaborators."""


class SalesAssistantError(Exception):
    """Base class for every error the service raises on purpose."""

    status_code = 500


class NotFoundError(SalesAssistantError):
    """A conversation id did not resolve to a record."""

    status_code = 404


class ForbiddenError(SalesAssistantError):
    """The conversation exists but is owned by someone else."""

    status_code = 403


class ValidationFailure(SalesAssistantError):
    """Malformed inbound message or malformed adapter output."""

    status_code = 422


class MetadataParseError(ValidationFailure):
    """Adapter output could not be decoded into sales metadata."""


class DependencyFailure(SalesAssistantError):
    """The language-generation adapter failed, timed out or returned nothing."""

    status_code = 502


class TransientAdapterFailure(DependencyFailure):
    """A best-effort adapter call failed; callers recover with a fallback."""


class StorageError(SalesAssistantError):
    """A repository write did not go through."""

    status_code = 500
