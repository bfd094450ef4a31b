"""Thread-safe registry of finalized errors keyed by their hash id."""

from __future__ import annotations

import threading
from dataclasses import replace

from lighthouse.langs import EN, RU, SPERROR_KEY
from lighthouse.levels import Level
from lighthouse.sperror import INTERNAL_SPEC, ErrSpec, SpError, ValidationError

_NIL_SPEC = ErrSpec(
    messages={EN: "Nil error provided", RU: "передана nil ошибка"},
    desc="Provided error is nil. This is not allowed)",
    hint="Please, check your code and provide a valid error",
    http_code=400,
    level=Level.HIGH_DEBUG,
)

_INVALID_SPEC = ErrSpec(
    messages={EN: "Failed to validate Error", RU: "Ошибка в процессе валидации Error"},
    desc=(
        "Failed to create hash id of your error. It happens when you try to register "
        "an error with an empty description. Provided data of error in Meta"
    ),
    hint=(
        "Please, check your fields and provide a valid description, hint and EN "
        "message for your error"
    ),
    http_code=400,
    level=Level.HIGH_DEBUG,
)

_NOT_FOUND_SPEC = ErrSpec(
    messages={EN: "Resource not found", RU: "Ресурс не найден"},
    desc="The requested resource could not be found on this server",
    hint="Please check the URL and try again",
    http_code=404,
    level=Level.HIGH_USER,
)

_BAD_REQUEST_SPEC = ErrSpec(
    messages={EN: "Bad request", RU: "Неверный запрос"},
    desc="The request could not be understood by the server due to malformed syntax",
    hint="Please check your request parameters and try again",
    http_code=400,
    level=Level.HIGH_USER,
)

_UNAUTHORIZED_SPEC = ErrSpec(
    messages={EN: "Unauthorized", RU: "Не авторизован"},
    desc="Authentication is required and has failed or has not been provided",
    hint="Please provide valid authentication credentials",
    http_code=401,
    level=Level.HIGH_USER,
)

_FORBIDDEN_SPEC = ErrSpec(
    messages={EN: "Forbidden", RU: "Доступ запрещен"},
    desc="You don't have permission to access this resource",
    hint="Please contact your administrator if you need access",
    http_code=403,
    level=Level.HIGH_USER,
)

_TIMEOUT_SPEC = ErrSpec(
    messages={EN: "Request timeout", RU: "Время ожидания истекло"},
    desc="The server timed out waiting for the request",
    hint="Please try again. If the problem persists, contact support",
    http_code=408,
    level=Level.HIGH_USER,
)


class Registry:
    """Stores finalized errors by hash id; lookups return copies."""

    def __init__(self):
        self._errors: dict[bytes, SpError] = {}
        self._lock = threading.Lock()

    def register(self, error: SpError | None) -> bytes:
        """Finalize ``error``, store it and return its hash id.

        Raises an SpError when ``error`` is None or cannot be finalized.
        """
        with self._lock:
            if error is None:
                raise SpError.from_spec(_NIL_SPEC)
            source = error.source
            try:
                key = error.done()
            except ValidationError as exc:
                raise SpError.from_spec(
                    replace(_INVALID_SPEC, cause=exc, meta={SPERROR_KEY: error.copy()})
                ) from exc
            finally:
                error.source = source
            self._errors[key] = error
            return key

    def get(self, key: bytes | None) -> SpError | None:
        """A copy of the error stored under ``key``, or None."""
        with self._lock:
            error = self._errors.get(key)
            return None if error is None else error.copy()

    def internal_error(self) -> SpError | None:
        """A copy of the generic internal server error, if registered."""
        return self.get(INTERNAL_SPEC.digest())


REGISTRY = Registry()
INTERNAL = REGISTRY.register(SpError.from_spec(INTERNAL_SPEC))
NOT_FOUND = REGISTRY.register(SpError.from_spec(_NOT_FOUND_SPEC))
BAD_REQUEST = REGISTRY.register(SpError.from_spec(_BAD_REQUEST_SPEC))
UNAUTHORIZED = REGISTRY.register(SpError.from_spec(_UNAUTHORIZED_SPEC))
FORBIDDEN = REGISTRY.register(SpError.from_spec(_FORBIDDEN_SPEC))
TIMEOUT = REGISTRY.register(SpError.from_spec(_TIMEOUT_SPEC))