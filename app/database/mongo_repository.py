"""
MongoDB repositories (Motor)
"""
from typing import Any, Dict, Optional
from pymongo import ASCENDING, DESCENDING, ReturnDocument

from app.config.database import Collections, DatabaseConfig, db_config
from app.database.repository import FormRepository, Page, SubmissionRepository, build_page, decode_cursor
from app.models.form import FormCreate, FormDefinition
from app.models.form_submission import Submission, SubmissionCreate
from app.utils.errors import ConflictError, NotFoundError, ValidationError
from app.utils.helpers import parse_object_id, serialize_doc, utc_now


def _keyset_query(query: Dict[str, Any], time_key: str, cursor: Optional[str]) -> Dict[str, Any]:
    """Restrict ``query`` to documents that sort after the cursor"""
    if not cursor:
        return query
    created_at, last_id = decode_cursor(cursor)
    # BSON dates are naive UTC
    created_at = created_at.replace(tzinfo=None)
    last_oid = parse_object_id(last_id)
    if last_oid is None:
        raise ValidationError("Invalid cursor")
    query = dict(query)
    query["$or"] = [
        {time_key: {"$lt": created_at}},
        {time_key: created_at, "_id": {"$lt": last_oid}},
    ]
    return query


class MongoFormRepository(FormRepository):

    def __init__(self, database: DatabaseConfig = db_config):
        self.database = database

    @property
    def collection(self):
        return self.database.get_collection(Collections.FORMS)

    async def ensure_indexes(self):
        await self.collection.create_index(
            [("owner_key", ASCENDING), ("created_at", DESCENDING), ("_id", DESCENDING)]
        )

    async def create(self, owner_key: str, form: FormCreate) -> FormDefinition:
        now = utc_now()
        document = form.model_dump(mode="json", by_alias=True)
        document.update({
            "owner_key": owner_key,
            "version": 1,
            "created_at": now,
            "updated_at": now,
        })
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return FormDefinition.model_validate(serialize_doc(document))

    async def get_by_id(self, form_id: str) -> Optional[FormDefinition]:
        object_id = parse_object_id(form_id)
        if object_id is None:
            return None
        document = await self.collection.find_one({"_id": object_id})
        if document is None:
            return None
        return FormDefinition.model_validate(serialize_doc(document))

    async def list(self, owner_key: str, limit: int, cursor: Optional[str] = None) -> Page[FormDefinition]:
        query = _keyset_query({"owner_key": owner_key}, "created_at", cursor)
        documents = await (
            self.collection.find(query)
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
            .limit(limit + 1)
            .to_list(length=limit + 1)
        )
        forms = [FormDefinition.model_validate(serialize_doc(d)) for d in documents]
        return build_page(forms, limit, lambda f: (f.created_at, f.id))

    async def update(self, form_id: str, changes: Dict[str, Any], expected_version: int) -> FormDefinition:
        object_id = parse_object_id(form_id)
        if object_id is None:
            raise NotFoundError("Form not found")

        update_data = dict(changes)
        update_data["updated_at"] = utc_now()
        document = await self.collection.find_one_and_update(
            {"_id": object_id, "version": expected_version},
            {"$set": update_data, "$inc": {"version": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if document is None:
            if await self.collection.count_documents({"_id": object_id}, limit=1):
                raise ConflictError()
            raise NotFoundError("Form not found")
        return FormDefinition.model_validate(serialize_doc(document))

    async def delete(self, form_id: str) -> bool:
        object_id = parse_object_id(form_id)
        if object_id is None:
            return False
        result = await self.collection.delete_one({"_id": object_id})
        return result.deleted_count > 0


class MongoSubmissionRepository(SubmissionRepository):

    def __init__(self, database: DatabaseConfig = db_config):
        self.database = database

    @property
    def collection(self):
        return self.database.get_collection(Collections.FORM_SUBMISSIONS)

    async def ensure_indexes(self):
        await self.collection.create_index(
            [("form_id", ASCENDING), ("submitted_at", DESCENDING), ("_id", DESCENDING)]
        )

    async def create(self, form_id: str, submission: SubmissionCreate) -> Submission:
        document = submission.model_dump(mode="json")
        document["form_id"] = form_id
        document["submitted_at"] = utc_now()
        result = await self.collection.insert_one(document)
        document["_id"] = result.inserted_id
        return Submission.model_validate(serialize_doc(document))

    async def list_by_form(self, form_id: str, limit: int, cursor: Optional[str] = None) -> Page[Submission]:
        query = _keyset_query({"form_id": form_id}, "submitted_at", cursor)
        documents = await (
            self.collection.find(query)
            .sort([("submitted_at", DESCENDING), ("_id", DESCENDING)])
            .limit(limit + 1)
            .to_list(length=limit + 1)
        )
        submissions = [Submission.model_validate(serialize_doc(d)) for d in documents]
        return build_page(submissions, limit, lambda s: (s.submitted_at, s.id))

    async def delete_by_form(self, form_id: str) -> int:
        result = await self.collection.delete_many({"form_id": form_id})
        return result.deleted_count
