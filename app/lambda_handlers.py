"""
AWS Lambda entrypoints.

Each function is deployable on its own (``app.lambda_handlers.create`` and so
on); ``route`` serves every form resource behind a single function. All of
them share one event loop and one lazily built handler context per process.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from app.config.logging_config import setup_logging
from app.database.factory import start_context
from app.handlers import forms, submissions
from app.handlers.base import Handler, HandlerContext
from app.handlers.dispatcher import dispatch
from app.utils.errors import InternalError
from app.utils.responses import build_response, error_response

setup_logging()
logger = logging.getLogger(__name__)

_loop = asyncio.new_event_loop()
_context: Optional[HandlerContext] = None


def _run(handler: Handler, event: Dict[str, Any]) -> Dict[str, Any]:
    global _context
    if (event.get("httpMethod") or "").upper() == "OPTIONS":
        return build_response(200)
    if _context is None:
        try:
            _context = _loop.run_until_complete(start_context())
        except Exception:
            # left unset so the next invocation retries the connection
            logger.exception("Failed to initialise the handler context")
            return error_response(InternalError())
    return _loop.run_until_complete(handler(event, _context))


def create(event, context=None):
    return _run(forms.create, event)


def get(event, context=None):
    return _run(forms.get, event)


def list_forms(event, context=None):
    return _run(forms.list_forms, event)


list = list_forms


def update(event, context=None):
    return _run(forms.update, event)


def delete(event, context=None):
    return _run(forms.delete, event)


def submit(event, context=None):
    return _run(submissions.submit, event)


def list_submissions(event, context=None):
    return _run(submissions.list_submissions, event)


def route(event, context=None):
    return _run(dispatch, event)
