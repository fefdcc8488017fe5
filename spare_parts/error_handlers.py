"""Custom exceptions and the boundary that turns them into result objects."""
import functools
from typing import Any, Callable, Optional, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .logging_config import get_logger

logger = get_logger("error_handlers")


class AppException(Exception):
    """Base exception for application-specific errors."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ResourceNotFoundError(AppException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: Union[int, str, None] = None):
        super().__init__(
            message=f"{resource} not found",
            details={"resource": resource, "identifier": str(identifier)}
        )


class DuplicateResourceError(AppException):
    """Raised when attempting to create a duplicate resource."""

    def __init__(self, message: str, field: str, value: str):
        super().__init__(
            message=message,
            details={"field": field, "value": value}
        )


class ValidationError(AppException):
    """Raised when data validation fails."""

    def __init__(self, message: str, errors: list = None):
        super().__init__(
            message=message,
            details={"validation_errors": errors or []}
        )


class NotAuthenticatedError(AppException):
    """No valid session for the caller."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message=message)


class UnauthorizedError(AppException):
    """Caller is signed in but lacks the role, or is acting on their own account."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message)


class SpreadsheetError(AppException):
    """Raised when a spreadsheet cannot be read or written."""

    def __init__(self, message: str, original_error: str = None):
        super().__init__(
            message=message,
            details={"original_error": original_error}
        )


def format_validation_errors(exc) -> str:
    """Flatten a pydantic ValidationError into one readable line."""
    errors = []
    for error in exc.errors():
        field = " -> ".join(str(loc) for loc in error["loc"])
        errors.append(f"{field}: {error['msg']}" if field else error["msg"])
    return "Validation failed: " + "; ".join(errors)


def _failure(message: str):
    # Imported lazily: schemas depend on models, which depend on this package
    from .schemas.common import OperationResult
    return OperationResult(success=False, error=message)


def service_boundary(
    message: str,
    on_error: Optional[Callable[[str], Any]] = None,
    integrity_message: Optional[str] = None,
):
    """
    Wrap a handler taking ``(db, ...)`` so nothing raises past it.

    Args:
        message: Generic failure text for unexpected errors
        on_error: Builds the failure value from a message; defaults to a
            failed OperationResult
        integrity_message: Text used when a constraint (usually a foreign
            key) rejects the write; falls back to ``message``
    """
    build = on_error or _failure

    def decorator(func):
        @functools.wraps(func)
        def wrapper(db, *args, **kwargs):
            try:
                return func(db, *args, **kwargs)
            except AppException as exc:
                db.rollback()
                logger.warning(
                    f"{func.__name__} rejected: {exc.message}",
                    extra={"details": exc.details}
                )
                return build(exc.message)
            except IntegrityError as exc:
                db.rollback()
                logger.error(
                    f"{func.__name__} integrity error: {exc.orig}",
                    extra={"exception_type": type(exc).__name__}
                )
                return build(integrity_message or message)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error(f"{func.__name__} database error: {exc}", exc_info=True)
                return build(message)
            except Exception as exc:
                db.rollback()
                logger.critical(f"{func.__name__} unhandled exception: {exc}", exc_info=True)
                return build(message)

        return wrapper

    return decorator
