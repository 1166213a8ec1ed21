"""
Form definition handlers - create, get, list, update, delete
"""
from app.handlers.base import (
    Envelope, Event, HandlerContext, endpoint, page_params, parse_json_body, path_id, validate_model,
)
from app.models.form import FormCreate, FormUpdate
from app.utils.auth import ensure_owner, resolve_principal
from app.utils.errors import NotFoundError, ValidationError
from app.utils.responses import build_response


@endpoint("Form create")
async def create(event: Event, ctx: HandlerContext) -> Envelope:
    """Create a new form owned by the caller"""
    principal = resolve_principal(event)
    form_data = validate_model(FormCreate, parse_json_body(event))

    form = await ctx.forms.create(principal, form_data)
    return build_response(200, {
        "message": "Form created successfully",
        "id": form.id,
        "form": form.to_public(),
    })


@endpoint("Form get")
async def get(event: Event, ctx: HandlerContext) -> Envelope:
    """Get form by ID"""
    principal = resolve_principal(event)
    form = await ctx.forms.get_by_id(path_id(event))
    if form is None:
        raise NotFoundError("Form not found")
    ensure_owner(form, principal)
    return build_response(200, {"form": form.to_public()})


@endpoint("Forms list")
async def list_forms(event: Event, ctx: HandlerContext) -> Envelope:
    """List the caller's forms, newest first"""
    principal = resolve_principal(event)
    limit, cursor = page_params(event)
    page = await ctx.forms.list(principal, limit=limit, cursor=cursor)
    return build_response(200, {
        "forms": [form.to_public() for form in page.items],
        "next_cursor": page.next_cursor,
    })


@endpoint("Form update")
async def update(event: Event, ctx: HandlerContext) -> Envelope:
    """Update name, status or schema; a new schema replaces the old one"""
    principal = resolve_principal(event)
    form_id = path_id(event)
    form_update = validate_model(FormUpdate, parse_json_body(event))
    changes = form_update.changes()
    if not changes:
        raise ValidationError("No fields to update")

    form = await ctx.forms.get_by_id(form_id)
    if form is None:
        raise NotFoundError("Form not found")
    ensure_owner(form, principal)

    expected_version = form_update.version if form_update.version is not None else form.version
    updated = await ctx.forms.update(form_id, changes, expected_version)
    return build_response(200, {
        "message": "Form updated successfully",
        "form": updated.to_public(),
    })


@endpoint("Form delete")
async def delete(event: Event, ctx: HandlerContext) -> Envelope:
    """Delete a form and its submissions. Unknown ids succeed as well."""
    principal = resolve_principal(event)
    form_id = path_id(event)

    form = await ctx.forms.get_by_id(form_id)
    if form is not None:
        ensure_owner(form, principal)
        await ctx.forms.delete(form_id)
    # Runs for unknown ids too: a delete interrupted between the two writes
    # leaves submissions without a form, and repeating the delete clears them
    await ctx.submissions.delete_by_form(form_id)

    return build_response(200, {"message": "Form deleted successfully"})
