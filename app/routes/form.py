"""
Form routes - HTTP adapter over the request dispatcher
"""
from typing import Any, Dict
from fastapi import APIRouter, Depends, Request

from app.config.settings import settings
from app.handlers.base import HandlerContext
from app.handlers.dispatcher import FORM, FORM_SUBMISSIONS, FORMS, dispatch
from app.utils.responses import to_http_response

router = APIRouter(prefix="/forms", tags=["Forms"])

ALL_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"]


def get_handler_context(request: Request) -> HandlerContext:
    return request.app.state.handler_context


async def build_event(request: Request, resource: str) -> Dict[str, Any]:
    """Translate a Starlette request into an API Gateway proxy event"""
    body = await request.body()
    return {
        "httpMethod": request.method,
        "resource": f"{settings.API_PREFIX}{resource}",
        "path": request.url.path,
        "pathParameters": dict(request.path_params) or None,
        "queryStringParameters": dict(request.query_params) or None,
        "headers": dict(request.headers),
        "body": body.decode("utf-8", errors="replace") if body else None,
    }


@router.api_route("", methods=ALL_METHODS)
async def forms_collection(request: Request, ctx: HandlerContext = Depends(get_handler_context)):
    """Create a form (POST) or list the caller's forms (GET)"""
    return to_http_response(await dispatch(await build_event(request, FORMS), ctx))


@router.api_route("/{id}", methods=ALL_METHODS)
async def form_item(request: Request, ctx: HandlerContext = Depends(get_handler_context)):
    """Get, update or delete one form"""
    return to_http_response(await dispatch(await build_event(request, FORM), ctx))


@router.api_route("/{id}/submissions", methods=ALL_METHODS)
async def form_submissions(request: Request, ctx: HandlerContext = Depends(get_handler_context)):
    """Submit a response (POST, public) or list submissions (GET)"""
    return to_http_response(await dispatch(await build_event(request, FORM_SUBMISSIONS), ctx))
