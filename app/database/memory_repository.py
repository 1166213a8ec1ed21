"""
In-process repositories. Same contract as the MongoDB ones; nothing survives
the process.
"""
import asyncio
import copy
from typing import Any, Dict, List, Optional

from app.database.repository import FormRepository, Page, SubmissionRepository, build_page, decode_cursor
from app.models.form import FormCreate, FormDefinition
from app.models.form_submission import Submission, SubmissionCreate
from app.utils.errors import ConflictError, NotFoundError
from app.utils.helpers import new_id, utc_now


def _after_cursor(documents: List[Dict], time_key: str, cursor: Optional[str]) -> List[Dict]:
    documents = sorted(documents, key=lambda d: (d[time_key], d["id"]), reverse=True)
    if cursor:
        last_key = decode_cursor(cursor)
        documents = [d for d in documents if (d[time_key], d["id"]) < last_key]
    return documents


class InMemoryFormRepository(FormRepository):

    def __init__(self):
        self._forms: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def create(self, owner_key: str, form: FormCreate) -> FormDefinition:
        now = utc_now()
        document = form.model_dump(mode="json", by_alias=True)
        document.update({
            "id": new_id(),
            "owner_key": owner_key,
            "version": 1,
            "created_at": now,
            "updated_at": now,
        })
        async with self._lock:
            self._forms[document["id"]] = document
        return FormDefinition.model_validate(copy.deepcopy(document))

    async def get_by_id(self, form_id: str) -> Optional[FormDefinition]:
        document = self._forms.get(form_id)
        if document is None:
            return None
        return FormDefinition.model_validate(copy.deepcopy(document))

    async def list(self, owner_key: str, limit: int, cursor: Optional[str] = None) -> Page[FormDefinition]:
        owned = [d for d in self._forms.values() if d["owner_key"] == owner_key]
        documents = _after_cursor(owned, "created_at", cursor)[:limit + 1]
        forms = [FormDefinition.model_validate(copy.deepcopy(d)) for d in documents]
        return build_page(forms, limit, lambda f: (f.created_at, f.id))

    async def update(self, form_id: str, changes: Dict[str, Any], expected_version: int) -> FormDefinition:
        async with self._lock:
            document = self._forms.get(form_id)
            if document is None:
                raise NotFoundError("Form not found")
            if document["version"] != expected_version:
                raise ConflictError()
            updated = copy.deepcopy(document)
            updated.update(copy.deepcopy(changes))
            updated["version"] = document["version"] + 1
            updated["updated_at"] = utc_now()
            self._forms[form_id] = updated
        return FormDefinition.model_validate(copy.deepcopy(updated))

    async def delete(self, form_id: str) -> bool:
        async with self._lock:
            return self._forms.pop(form_id, None) is not None


class InMemorySubmissionRepository(SubmissionRepository):

    def __init__(self):
        self._submissions: Dict[str, Dict[str, Any]] = {}
        self._lock = asyncio.Lock()

    async def create(self, form_id: str, submission: SubmissionCreate) -> Submission:
        document = submission.model_dump(mode="json")
        document.update({
            "id": new_id(),
            "form_id": form_id,
            "submitted_at": utc_now(),
        })
        async with self._lock:
            self._submissions[document["id"]] = document
        return Submission.model_validate(copy.deepcopy(document))

    async def list_by_form(self, form_id: str, limit: int, cursor: Optional[str] = None) -> Page[Submission]:
        matching = [d for d in self._submissions.values() if d["form_id"] == form_id]
        documents = _after_cursor(matching, "submitted_at", cursor)[:limit + 1]
        submissions = [Submission.model_validate(copy.deepcopy(d)) for d in documents]
        return build_page(submissions, limit, lambda s: (s.submitted_at, s.id))

    async def delete_by_form(self, form_id: str) -> int:
        async with self._lock:
            doomed = [key for key, d in self._submissions.items() if d["form_id"] == form_id]
            for key in doomed:
                del self._submissions[key]
        return len(doomed)
