"""
Request dispatcher - routes a proxy event to its operation handler
"""
import logging
import re
from typing import Dict, Optional, Tuple
from urllib.parse import unquote

from app.handlers import forms, submissions
from app.handlers.base import Envelope, Event, Handler, HandlerContext
from app.utils.errors import MethodNotAllowedError, NotFoundError
from app.utils.responses import build_response, error_response

logger = logging.getLogger(__name__)

FORMS = "/forms"
FORM = "/forms/{id}"
FORM_SUBMISSIONS = "/forms/{id}/submissions"

ROUTES: Dict[str, Dict[str, Handler]] = {
    FORMS: {"POST": forms.create, "GET": forms.list_forms},
    FORM: {"GET": forms.get, "PUT": forms.update, "DELETE": forms.delete},
    FORM_SUBMISSIONS: {"POST": submissions.submit, "GET": submissions.list_submissions},
}

_ROUTE_RE = re.compile(r"/forms(?:/(?P<id>[^/]+))?(?P<submissions>/submissions)?/?$")
_PARAM_RE = re.compile(r"\{[^}]+\}")


def resolve_route(event: Event) -> Tuple[Optional[str], Event]:
    """Work out the route key and make sure ``pathParameters["id"]`` is set.

    Uses the API Gateway ``resource`` template when there is one, otherwise
    the raw ``path``. Returns ``(None, event)`` for paths outside the form API.
    """
    resource = event.get("resource")
    if resource:
        match = _ROUTE_RE.search(_PARAM_RE.sub("{id}", resource))
    else:
        match = _ROUTE_RE.search(event.get("path") or "")
    if match is None:
        return None, event

    if match.group("id") is None:
        return FORMS, event

    route = FORM_SUBMISSIONS if match.group("submissions") else FORM
    params = dict(event.get("pathParameters") or {})
    if "id" not in params:
        if resource:
            # template parameter had another name, e.g. {formId}
            params["id"] = next(iter(params.values()), None)
        else:
            params["id"] = unquote(match.group("id"))
    return route, {**event, "pathParameters": params}


async def dispatch(event: Event, ctx: HandlerContext) -> Envelope:
    method = (event.get("httpMethod") or "").upper()
    if method == "OPTIONS":
        return build_response(200)

    route, event = resolve_route(event)
    if route is None:
        logger.info("No route for %s %s", method, event.get("path", ""))
        return error_response(NotFoundError("Resource not found"))

    handler = ROUTES[route].get(method)
    if handler is None:
        return error_response(MethodNotAllowedError())
    return await handler(event, ctx)
