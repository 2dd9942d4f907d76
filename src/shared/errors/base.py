"""Base class for user friendly errors.

The canonical error every transport serializes from. Error names and default
messages are generated from the subclass declaration.
"""

import re
from http import HTTPStatus
from typing import Any

from loguru import logger
from pydantic import ValidationError

from .context import trace_id_var
from .schemas import ErrorDetail, ErrorResponse

_UNSET: Any = object()


class UserFriendlyError(Exception):
    """Base class for all errors that may reach a client.

    Features:
    - Auto-generates ``name`` from class name (e.g., TooManyRequest -> TOO_MANY_REQUEST)
    - Auto-generates ``default_message`` from docstring
    - Validates ``data`` via Pydantic
    - Keeps the original error as ``cause`` for logs only
    """

    status: int = 500
    type: str = "INTERNAL_SERVER_ERROR"
    name: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An internal error occurred."

    def __init__(
        self,
        message: str | None = None,
        data: dict[str, Any] | ErrorDetail | None = None,
        status: int | None = None,
    ) -> None:
        self.message = message or self.default_message

        if data is None:
            self.data: dict[str, Any] = {}
        elif isinstance(data, ErrorDetail):
            self.data = data.model_dump(exclude_none=True)
        else:
            try:
                self.data = ErrorDetail(**data).model_dump(exclude_none=True)
            except (ValidationError, TypeError):
                logger.warning(f"Invalid data in {self.__class__.__name__}, kept as is")
                self.data = {str(key): value for key, value in data.items()}

        if status is not None:
            self.status = status

        self._cause: Any = _UNSET
        super().__init__(self.message)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        """Auto-generate name and default_message for subclasses."""
        super().__init_subclass__(**kwargs)

        if "name" not in cls.__dict__:
            cls.name = re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).upper()

        if "default_message" not in cls.__dict__ and cls.__doc__:
            cls.default_message = cls.__doc__.strip().split("\n")[0]

    @property
    def cause(self) -> Any:
        """Original error, ``None`` when not set."""
        return None if self._cause is _UNSET else self._cause

    @cause.setter
    def cause(self, value: Any) -> None:
        if self._cause is not _UNSET:
            raise RuntimeError(f"{self.__class__.__name__}.cause is already set")
        self._cause = value
        if isinstance(value, BaseException):
            self.__cause__ = value

    @property
    def code(self) -> str:
        """HTTP reason phrase for the status."""
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown Error"

    @property
    def trace_id(self) -> str:
        return trace_id_var.get()

    @property
    def is_internal(self) -> bool:
        return self.status >= 500

    def log(self, channel: str) -> None:
        """Emit one structured log entry for the given transport channel."""
        bound = logger.bind(
            channel=channel,
            status=self.status,
            type=self.type,
            error_name=self.name,
        )
        if not self.is_internal:
            bound.info(f"[{channel}] {self.name}: {self.message}")
            return

        cause = self.cause
        if isinstance(cause, BaseException):
            bound.opt(exception=cause).error(f"[{channel}] Internal server error")
        elif cause is not None:
            bound.error(f"[{channel}] Internal server error: {cause!r}")
        else:
            bound.opt(exception=self).error(f"[{channel}] Internal server error")

    def to_response(self) -> ErrorResponse:
        """Serialize to Pydantic model."""
        return ErrorResponse(
            status=self.status,
            code=self.code,
            type=self.type,
            name=self.name,
            message=self.message,
            data=self.data or None,
            trace_id=self.trace_id,
        )

    def to_json(self) -> dict[str, Any]:
        """Serialize to the JSON envelope sent to callers. Never includes the cause."""
        return self.to_response().model_dump(exclude_none=True)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(status={self.status}, message={self.message!r})"
