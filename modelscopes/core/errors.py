from __future__ import annotations

import json
from typing import Any


class ExtendedError(Exception):
    """Error that carries an HTTP status, a plain message and extra data.

    ``str(error)`` is a JSON document with all three parts so the error stays
    readable when it ends up in a log line instead of an HTTP response.
    """

    status: int = 500

    def __init__(self, status: int | None = None, message: str | None = None, data: Any = None):
        if status is not None:
            self.status = int(status)
        self.message_text = message
        self.data = data if data is not None else {}
        super().__init__(
            json.dumps(
                {"status": self.status, "message": message, "data": self.data},
                ensure_ascii=False,
                default=str,
            )
        )


class ValidationError(ExtendedError):
    status = 422

    def __init__(self, message: str | None = None, data: Any = None):
        super().__init__(None, message, data)


class FormatError(ExtendedError, ValueError):
    status = 400

    def __init__(self, message: str | None = None, data: Any = None):
        super().__init__(None, message, data)


class InvalidUsageError(RuntimeError):
    def __init__(self, cls: Any, expected: str):
        self.cls = cls
        self.expected = expected
        name = getattr(cls, "__qualname__", None) or type(cls).__qualname__
        super().__init__(f"{name} is not a {expected}; model scopes can only be used with {expected} classes.")
