from typing import Any, Mapping, Type, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


class CampusError(Exception):
    """Base of every error raised by the data layer."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class InvalidInputError(CampusError):
    """Form input rejected before it reaches the store."""


class NotFoundError(CampusError):
    pass


class DepartmentInUseError(CampusError):
    pass


class AuthenticationError(CampusError):
    pass


class PersistenceError(CampusError):
    pass


class DuplicateKeyError(PersistenceError):
    """Unique constraint violated; the caller can correct the input and retry."""


class StorageUnavailableError(PersistenceError):
    """The database file could not be read or written."""


def _format_errors(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x != "__root__")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts)


def validate_form(schema: Type[M], data: Mapping[str, Any]) -> M:
    """Build ``schema`` from raw form values, raising InvalidInputError on bad input."""
    try:
        return schema.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidInputError(_format_errors(e)) from e
