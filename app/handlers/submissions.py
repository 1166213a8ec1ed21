"""
Submission handlers - public intake and the owner's submission list
"""
from app.handlers.base import (
    Envelope, Event, HandlerContext, endpoint, page_params, parse_json_body, path_id, validate_model,
)
from app.models.form import FormStatus
from app.models.form_submission import SubmissionCreate
from app.services.submission_validation import validate_submission_values
from app.utils.auth import ensure_owner, resolve_principal
from app.utils.errors import NotFoundError, ValidationError
from app.utils.responses import build_response


@endpoint("Submission")
async def submit(event: Event, ctx: HandlerContext) -> Envelope:
    """Submit a response to an active form. No credentials required."""
    form_id = path_id(event)
    submission = validate_model(SubmissionCreate, parse_json_body(event))

    form = await ctx.forms.get_by_id(form_id)
    if form is None or form.status != FormStatus.ACTIVE:
        raise NotFoundError("Form not found or is inactive")

    problems = validate_submission_values(form, submission.values)
    if problems:
        raise ValidationError("; ".join(problems))

    created = await ctx.submissions.create(form_id, submission)
    return build_response(200, {
        "message": "Form submitted successfully",
        "id": created.id,
        "submission": created.to_public(),
    })


@endpoint("Submissions list")
async def list_submissions(event: Event, ctx: HandlerContext) -> Envelope:
    principal = resolve_principal(event)
    form_id = path_id(event)
    limit, cursor = page_params(event)

    form = await ctx.forms.get_by_id(form_id)
    if form is None:
        raise NotFoundError("Form not found")
    ensure_owner(form, principal)

    page = await ctx.submissions.list_by_form(form_id, limit=limit, cursor=cursor)
    return build_response(200, {
        "submissions": [s.to_public() for s in page.items],
        "next_cursor": page.next_cursor,
    })
