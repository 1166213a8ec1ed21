import asyncio
import json
import os

os.environ["STORAGE_BACKEND"] = "memory"
os.environ["SECRET_KEY"] = "test-secret-key"

import pytest

from app.database.factory import create_context

OWNER_KEY = "sa_" + "0123456789abcdef" * 2
OTHER_KEY = "sa_" + "fedcba9876543210" * 2


@pytest.fixture
def ctx():
    return create_context("memory")


@pytest.fixture
def make_event():
    def _make(method, resource="/forms", form_id=None, body=None, key=OWNER_KEY, query=None, headers=None):
        event_headers = {"Content-Type": "application/json"}
        if key:
            event_headers["X-Access-Key"] = key
        event_headers.update(headers or {})
        if body is not None and not isinstance(body, str):
            body = json.dumps(body)
        path = resource.replace("{id}", form_id or "")
        return {
            "httpMethod": method,
            "resource": resource,
            "path": path,
            "pathParameters": {"id": form_id} if form_id else None,
            "queryStringParameters": query,
            "headers": event_headers,
            "body": body,
        }
    return _make


@pytest.fixture
def call(ctx):
    """Run a handler against the in-memory context; returns (status, parsed body)"""
    def _call(handler, event):
        response = asyncio.run(handler(event, ctx))
        body = json.loads(response["body"]) if response["body"] else None
        return response["statusCode"], body
    return _call


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client
