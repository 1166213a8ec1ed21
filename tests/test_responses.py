import json

from app.utils.errors import ConflictError, InternalError, NotFoundError, ValidationError
from app.utils.responses import build_response, error_response

EXPECTED_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-Api-Key, X-Access-Key",
    "Content-Type": "application/json",
}


def test_build_response_serializes_body_and_sets_cors_headers():
    response = build_response(200, {"forms": []})
    assert response["statusCode"] == 200
    assert response["headers"] == EXPECTED_HEADERS
    assert json.loads(response["body"]) == {"forms": []}


def test_build_response_without_body_is_empty():
    response = build_response(200)
    assert response["body"] == ""
    assert response["headers"] == EXPECTED_HEADERS


def test_headers_are_copied_per_response():
    first = build_response(200)
    first["headers"]["X-Extra"] = "1"
    assert "X-Extra" not in build_response(200)["headers"]


def test_error_response_uses_status_of_error():
    assert error_response(ValidationError("schema: bad"))["statusCode"] == 400
    assert error_response(NotFoundError())["statusCode"] == 404
    assert error_response(ConflictError())["statusCode"] == 409
    body = json.loads(error_response(NotFoundError("Form not found"))["body"])
    assert body == {"error": "Form not found"}


def test_internal_error_never_carries_detail():
    error = InternalError("connection refused to 10.0.0.5")
    body = json.loads(error_response(error)["body"])
    assert body == {"error": "Internal server error"}
    assert error_response(error)["statusCode"] == 500
