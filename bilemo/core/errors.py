from __future__ import annotations

import logging
from typing import Any, Iterable

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INVALID_DATA_MESSAGE = "Invalid data provided"

# erros em que o corpo inteiro é inutilizável (JSON quebrado, lista no lugar de objeto...)
_BODY_LEVEL_TYPES = {"json_invalid", "model_attributes_type", "dict_type", "model_type"}


def _clean_message(message: str) -> str:
    prefix = "Value error, "
    return message[len(prefix):] if message.startswith(prefix) else message


def validation_errors_to_dict(errors: Iterable[dict[str, Any]]) -> dict[str, str] | None:
    """Converte erros do pydantic em ``{campo: mensagem}``.

    Retorna None quando o erro é do corpo como um todo.
    """
    result: dict[str, str] = {}
    for error in errors:
        location = tuple(error.get("loc") or ())
        if error.get("type") in _BODY_LEVEL_TYPES or location in {("body",), ()}:
            return None
        path = [str(part) for part in location if part not in {"body", "query", "path"}]
        field = ".".join(path) or "body"
        result.setdefault(field, _clean_message(str(error.get("msg", ""))))
    return result


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = validation_errors_to_dict(exc.errors())
    logger.info(
        "validation failed endpoint=%s fields=%s",
        request.url.path,
        ",".join(sorted(errors)) if errors else "body",
    )
    if errors is None:
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": INVALID_DATA_MESSAGE})
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"errors": errors})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
