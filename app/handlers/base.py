"""
Shared plumbing for the operation handlers.

Every handler takes an API Gateway proxy event plus a ``HandlerContext`` and
returns a response envelope. ``endpoint`` wraps a handler with the common
contract: log the call, answer CORS pre-flight, map ``FormServiceError`` to
its status and anything else to a generic 500.
"""
import base64
import functools
import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import pydantic

from app.config.settings import settings
from app.database.repository import FormRepository, SubmissionRepository
from app.utils.errors import FormServiceError, InternalError, NotFoundError, ValidationError
from app.utils.responses import build_response, error_response

logger = logging.getLogger(__name__)

Event = Dict[str, Any]
Envelope = Dict[str, Any]


@dataclass
class HandlerContext:
    """Per-process collaborators handed to every handler invocation"""
    forms: FormRepository
    submissions: SubmissionRepository


Handler = Callable[[Event, HandlerContext], Awaitable[Envelope]]


def endpoint(description: str) -> Callable[[Handler], Handler]:
    """Wrap a handler in the pre-flight / error boundary.

    ``description`` names the operation in log lines, e.g. "Form create".
    """
    def decorator(func: Handler) -> Handler:
        @functools.wraps(func)
        async def wrapper(event: Event, ctx: HandlerContext) -> Envelope:
            method = (event.get("httpMethod") or "").upper()
            logger.info("%s handler called: %s %s", description, method, event.get("path", ""))

            if method == "OPTIONS":
                return build_response(200)

            try:
                return await func(event, ctx)
            except FormServiceError as e:
                if isinstance(e, InternalError):
                    logger.error("%s error: %s", description, e.message)
                else:
                    logger.info("%s rejected (%d): %s", description, e.status_code, e.message)
                return error_response(e)
            except Exception:
                logger.exception("%s error", description)
                return error_response(InternalError())

        return wrapper
    return decorator


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def parse_json_body(event: Event) -> Dict[str, Any]:
    """Decode the request body; it must be a JSON object"""
    raw = event.get("body")
    if raw is None or raw == "":
        raise ValidationError("Request body is required")
    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw, validate=True).decode("utf-8")
        except (TypeError, ValueError):
            raise ValidationError("Request body must be valid JSON")
    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except (TypeError, ValueError):
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def format_validation_error(exc: pydantic.ValidationError) -> str:
    """First pydantic error as ``location: message``"""
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error.get("loc", ()))
    message = error.get("msg", "invalid value")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return f"{location}: {message}" if location else message


def validate_model(model: type, payload: Dict[str, Any]):
    try:
        return model.model_validate(payload)
    except pydantic.ValidationError as e:
        raise ValidationError(format_validation_error(e))


def path_id(event: Event, name: str = "id") -> str:
    """Id from the path parameters; a missing id reads as an unknown form"""
    value = (event.get("pathParameters") or {}).get(name)
    if not value:
        raise NotFoundError("Form not found")
    return value


def query_param(event: Event, name: str) -> Optional[str]:
    return (event.get("queryStringParameters") or {}).get(name)


def page_params(event: Event) -> Tuple[int, Optional[str]]:
    """``limit`` and ``cursor`` query parameters with bounds checked"""
    raw_limit = query_param(event, "limit")
    if raw_limit is None or raw_limit == "":
        limit = settings.DEFAULT_PAGE_SIZE
    else:
        try:
            limit = int(raw_limit)
        except ValueError:
            raise ValidationError("limit must be an integer")
        if not 1 <= limit <= settings.MAX_PAGE_SIZE:
            raise ValidationError(f"limit must be between 1 and {settings.MAX_PAGE_SIZE}")
    cursor = query_param(event, "cursor") or None
    return limit, cursor
