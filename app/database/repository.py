"""
Persistence interfaces for form definitions and submissions.

Handlers depend only on these abstract classes. ``mongo_repository`` backs
them with MongoDB through Motor, ``memory_repository`` keeps everything in
process (tests and local runs).

Listings are keyset-paginated, newest first. A cursor is the opaque,
base64url-encoded ``(created_at, id)`` key of the last item on the previous
page.
"""
import base64
import binascii
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, TypeVar

from app.models.form import FormCreate, FormDefinition
from app.models.form_submission import Submission, SubmissionCreate
from app.utils.errors import ValidationError
from app.utils.helpers import ensure_utc

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None


def encode_cursor(created_at: datetime, item_id: str) -> str:
    raw = json.dumps({"t": created_at.isoformat(), "id": item_id}).encode("utf-8")
    return base64.urlsafe_b64encode(raw).decode("ascii")


def decode_cursor(cursor: str) -> Tuple[datetime, str]:
    """Inverse of ``encode_cursor``; raises ValidationError on garbage"""
    try:
        data = json.loads(base64.urlsafe_b64decode(cursor.encode("ascii")))
        created_at = ensure_utc(datetime.fromisoformat(data["t"]))
        item_id = data["id"]
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError) as e:
        raise ValidationError("Invalid cursor") from e
    if not isinstance(item_id, str):
        raise ValidationError("Invalid cursor")
    return created_at, item_id


def build_page(items: List[T], limit: int, key: Callable[[T], Tuple[datetime, str]]) -> Page[T]:
    """Cut a page from up to ``limit + 1`` items fetched in listing order"""
    if len(items) <= limit:
        return Page(items=items)
    items = items[:limit]
    return Page(items=items, next_cursor=encode_cursor(*key(items[-1])))


class FormRepository(ABC):
    """Storage for form definitions"""

    @abstractmethod
    async def create(self, owner_key: str, form: FormCreate) -> FormDefinition:
        """Persist a new form; id, version and timestamps are assigned here"""

    @abstractmethod
    async def get_by_id(self, form_id: str) -> Optional[FormDefinition]:
        """Return the form or None when no such id exists"""

    @abstractmethod
    async def list(self, owner_key: str, limit: int, cursor: Optional[str] = None) -> Page[FormDefinition]:
        """Forms owned by ``owner_key``, newest first"""

    @abstractmethod
    async def update(self, form_id: str, changes: Dict[str, Any], expected_version: int) -> FormDefinition:
        """Apply ``changes`` only if the stored version equals ``expected_version``.

        Raises NotFoundError when the form is gone and ConflictError when the
        version moved on.
        """

    @abstractmethod
    async def delete(self, form_id: str) -> bool:
        """Hard delete; returns whether a form was removed"""


class SubmissionRepository(ABC):
    """Storage for submissions"""

    @abstractmethod
    async def create(self, form_id: str, submission: SubmissionCreate) -> Submission:
        """Persist a submission; ``submitted_at`` comes from the server clock"""

    @abstractmethod
    async def list_by_form(self, form_id: str, limit: int, cursor: Optional[str] = None) -> Page[Submission]:
        """Submissions for one form, newest first"""

    @abstractmethod
    async def delete_by_form(self, form_id: str) -> int:
        """Remove every submission of a form; returns how many were removed"""
