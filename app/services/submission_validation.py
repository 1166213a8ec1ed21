"""
Submission intake validation

Checks submitted values against the form schema: unknown keys, missing
required fields, and per-type rules. All problems are collected so the
submit handler can report them in one response.
"""
import math
import re
from datetime import date
from typing import Any, Dict, List, Optional

from app.models.form import FieldType, FormDefinition, FormField

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
URL_PATTERN = re.compile(r'^https?://[^\s/$.?#].[^\s]*$', re.IGNORECASE)
TEL_PATTERN = re.compile(r'^\+?[0-9 ()\-.]{5,20}$')
DEFAULT_MAX_RATING = 5

STRING_TYPES = {
    FieldType.TEXT, FieldType.TEXTAREA, FieldType.EMAIL, FieldType.URL, FieldType.TEL,
    FieldType.DATE, FieldType.FILE, FieldType.SIGNATURE, FieldType.HIDDEN,
    FieldType.SELECT, FieldType.RADIO,
}


def is_blank(value: Any) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if not isinstance(value, (int, float, str)):
        return None
    try:
        number = float(value.strip() if isinstance(value, str) else value)
    except (ValueError, OverflowError):
        return None
    # NaN and infinities never satisfy a bound or a rating
    return number if math.isfinite(number) else None


def _check_bounds(field: FormField, number: float) -> Optional[str]:
    rules = field.validation
    if rules is None:
        return None
    if rules.min is not None and number < rules.min:
        return f"{field.name}: must be at least {rules.min:g}"
    if rules.max is not None and number > rules.max:
        return f"{field.name}: must be at most {rules.max:g}"
    return None


def _check_string(field: FormField, value: str) -> Optional[str]:
    rules = field.validation
    if rules is None:
        return None
    if rules.minLength is not None and len(value) < rules.minLength:
        return f"{field.name}: must be at least {rules.minLength} characters"
    if rules.maxLength is not None and len(value) > rules.maxLength:
        return f"{field.name}: must be at most {rules.maxLength} characters"
    if rules.pattern:
        if not re.fullmatch(rules.pattern, value):
            return f"{field.name}: does not match the required format"
    return None


def check_value(field: FormField, value: Any) -> Optional[str]:
    """Return a problem description for ``value`` or None when it is acceptable"""
    if field.type in (FieldType.NUMBER, FieldType.RATING):
        number = _as_number(value)
        if number is None:
            return f"{field.name}: must be a number"
        if field.type == FieldType.RATING:
            top = field.validation.max if field.validation and field.validation.max is not None else DEFAULT_MAX_RATING
            if number != int(number) or not 1 <= number <= top:
                return f"{field.name}: must be a whole rating between 1 and {top:g}"
            return None
        return _check_bounds(field, number)

    if field.type == FieldType.CHECKBOX:
        if isinstance(value, bool):
            return None
        if isinstance(value, list) and all(isinstance(v, str) for v in value):
            unknown = [v for v in value if field.options and v not in field.options]
            if unknown:
                return f"{field.name}: unknown option(s) {', '.join(unknown)}"
            return None
        return f"{field.name}: must be true/false or a list of options"

    if field.type in STRING_TYPES and not isinstance(value, str):
        return f"{field.name}: must be a string"

    if field.type == FieldType.EMAIL and not EMAIL_PATTERN.match(value):
        return f"{field.name}: must be a valid email address"
    if field.type == FieldType.URL and not URL_PATTERN.match(value):
        return f"{field.name}: must be a valid URL"
    if field.type == FieldType.TEL and not TEL_PATTERN.match(value):
        return f"{field.name}: must be a valid phone number"
    if field.type == FieldType.DATE:
        try:
            date.fromisoformat(value)
        except ValueError:
            return f"{field.name}: must be a date in YYYY-MM-DD format"
    if field.type in (FieldType.SELECT, FieldType.RADIO) and field.options and value not in field.options:
        return f"{field.name}: must be one of {', '.join(field.options)}"

    return _check_string(field, value)


def validate_submission_values(form: FormDefinition, values: Dict[str, Any]) -> List[str]:
    """Return every problem found; an empty list means the submission is valid"""
    problems = []
    fields = {field.name: field for field in form.schema_fields}

    unknown = [key for key in values if key not in fields]
    if unknown:
        problems.append(f"Unknown field(s): {', '.join(sorted(unknown))}")

    for name, field in fields.items():
        value = values.get(name)
        if is_blank(value):
            if field.required:
                problems.append(f"{name}: is required")
            continue
        problem = check_value(field, value)
        if problem:
            problems.append(problem)

    return problems
