"""
Error shaping for the function endpoints.

The browser client only looks at the status code and the JSON body, so every
failure, including ones FastAPI would normally answer itself (422 body
validation, unhandled exceptions), is turned into
{"success": false, "message": ...} with the documented status.
"""
import logging
from typing import Any, Callable, Coroutine, Dict

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from pharmacy_pos.core.exceptions import (
    DomainError,
    PersistenceError,
    ValidationError,
    describe_validation_error,
    error_response,
)

logger = logging.getLogger(__name__)


class FunctionRoute(APIRoute):
    # Extra keys merged into every error body
    error_extras: Dict[str, Any] = {}

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()
        extras = self.error_extras

        async def function_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except RequestValidationError as exc:
                return error_response(ValidationError(describe_validation_error(exc)), **extras)
            except DomainError as exc:
                return error_response(exc, **extras)
            except Exception as exc:
                logger.error(f"Unhandled error in {request.method} {request.url.path}: {exc}", exc_info=True)
                return error_response(PersistenceError(), **extras)

        return function_route_handler


class BulkImportRoute(FunctionRoute):
    # Client always reads `errors`, even on a top-level failure
    error_extras = {"errors": []}
