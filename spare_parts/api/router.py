"""
In-process channel router.

Handlers register under ``prefix:name`` channels, the way HTTP routes
register under a path. Dispatch validates the payload into the handler's
request type and never raises: malformed payloads and unknown channels
come back as failed results.
"""
from typing import Any, Callable, Optional

from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from spare_parts.core.security import SessionContext
from spare_parts.error_handlers import format_validation_errors
from spare_parts.logging_config import get_logger
from spare_parts.schemas.common import OperationResult

logger = get_logger("router")


class Route:
    """A registered handler and how to feed it."""

    def __init__(
        self,
        channel: str,
        handler: Callable,
        request: Any = None,
        fallback: Optional[Callable[[str], Any]] = None,
    ):
        self.channel = channel
        self.handler = handler
        self.request = request
        self.fallback = fallback or OperationResult.failure
        self._adapter = TypeAdapter(request) if request is not None else None

    def parse(self, payload: Any) -> Any:
        if payload is None and isinstance(self.request, type) and issubclass(self.request, BaseModel):
            payload = {}
        return self._adapter.validate_python(payload)

    def __call__(self, db: Session, ctx: SessionContext, payload: Any = None) -> Any:
        if self._adapter is None:
            return self.handler(db, ctx)

        try:
            request = self.parse(payload)
        except PydanticValidationError as exc:
            message = format_validation_errors(exc)
            logger.warning(f"Invalid payload for {self.channel}: {message}")
            return self.fallback(message)

        return self.handler(db, ctx, request)


class ChannelRouter:
    """Collects handlers under a channel prefix."""

    def __init__(self, prefix: str = "", tags: Optional[list[str]] = None):
        self.prefix = prefix
        self.tags = tags or []
        self.routes: dict[str, Route] = {}

    def _channel(self, name: str) -> str:
        return f"{self.prefix}:{name}" if self.prefix else name

    def handle(self, name: str, request: Any = None, fallback: Optional[Callable[[str], Any]] = None):
        """Register the decorated function as the handler for ``prefix:name``."""
        def decorator(func):
            channel = self._channel(name)
            self.routes[channel] = Route(channel, func, request=request, fallback=fallback)
            return func

        return decorator

    def include_router(self, router: "ChannelRouter") -> None:
        for channel, route in router.routes.items():
            if channel in self.routes:
                raise ValueError(f"Channel registered twice: {channel}")
            self.routes[channel] = route

    @property
    def channels(self) -> list[str]:
        return sorted(self.routes)

    def dispatch(self, channel: str, db: Session, ctx: SessionContext, payload: Any = None) -> Any:
        route = self.routes.get(channel)
        if route is None:
            logger.warning(f"Unknown channel: {channel}")
            return OperationResult.failure(f"Unknown channel: {channel}")
        return route(db, ctx, payload)
