"""
Response envelope shared by every handler
"""
import json
from typing import Any, Dict, Optional
from fastapi.responses import Response

from app.config.settings import settings
from app.utils.errors import FormServiceError


def build_response(status_code: int, body: Optional[Any] = None) -> Dict[str, Any]:
    """Build a Lambda proxy style response with the fixed CORS headers"""
    return {
        "statusCode": status_code,
        "headers": dict(settings.CORS_HEADERS),
        "body": json.dumps(body) if body is not None else "",
    }


def error_response(error: FormServiceError) -> Dict[str, Any]:
    """Envelope for a handled error: ``{"error": message}``"""
    return build_response(error.status_code, {"error": error.message})


def to_http_response(envelope: Dict[str, Any]) -> Response:
    """Render an envelope as a FastAPI response"""
    return Response(
        content=envelope["body"],
        status_code=envelope["statusCode"],
        headers=envelope["headers"],
    )
