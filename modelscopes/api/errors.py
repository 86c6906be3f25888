from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from modelscopes.core.errors import ExtendedError

_LOG = logging.getLogger("modelscopes.http")


def error_payload(exc: ExtendedError) -> dict:
    return {"detail": exc.message_text, "data": exc.data}


def install_scope_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ExtendedError)
    async def _extended_error_handler(request: Request, exc: ExtendedError):
        _LOG.info(
            "%s %s status=%s error=%s",
            request.method,
            request.url.path,
            exc.status,
            exc.message_text,
        )
        return JSONResponse(status_code=exc.status, content=error_payload(exc))
