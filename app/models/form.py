"""
Form definition models for the form builder
"""
import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum

from app.config.settings import settings

class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    TEXTAREA = "textarea"
    FILE = "file"
    DATE = "date"
    URL = "url"
    TEL = "tel"
    RATING = "rating"
    SIGNATURE = "signature"
    HIDDEN = "hidden"

class FieldValidation(BaseModel):
    minLength: Optional[int] = Field(None, ge=0)
    maxLength: Optional[int] = Field(None, ge=0)
    pattern: Optional[str] = None
    min: Optional[float] = None
    max: Optional[float] = None

    @field_validator("pattern")
    @classmethod
    def pattern_compiles(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            try:
                re.compile(v)
            except re.error as e:
                raise ValueError(f"invalid pattern: {e}")
        return v

class FormField(BaseModel):
    name: str
    type: FieldType = FieldType.TEXT
    label: Optional[str] = None
    required: bool = False
    placeholder: Optional[str] = None
    options: List[str] = Field(default_factory=list)  # For select, radio, checkbox
    validation: Optional[FieldValidation] = None

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field name must not be empty")
        return v

def check_schema(fields: List[FormField]) -> List[FormField]:
    """Schema invariants shared by create and update"""
    if not fields:
        raise ValueError("schema must contain at least one field")
    if len(fields) > settings.MAX_FIELDS_PER_FORM:
        raise ValueError(f"schema may contain at most {settings.MAX_FIELDS_PER_FORM} fields")
    seen = set()
    for field in fields:
        if field.name in seen:
            raise ValueError(f"field names must be unique (duplicate: {field.name})")
        seen.add(field.name)
    return fields

class FormStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"

class FormCreate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    status: FormStatus = FormStatus.ACTIVE
    schema_fields: List[FormField] = Field(..., alias="schema")

    class Config:
        populate_by_name = True

    @field_validator("schema_fields")
    @classmethod
    def validate_schema(cls, v: List[FormField]) -> List[FormField]:
        return check_schema(v)

class FormUpdate(BaseModel):
    """Partial update; a supplied schema replaces the stored one entirely"""
    name: Optional[str] = Field(None, max_length=200)
    status: Optional[FormStatus] = None
    schema_fields: Optional[List[FormField]] = Field(None, alias="schema")
    version: Optional[int] = Field(None, ge=1)

    class Config:
        populate_by_name = True

    @field_validator("schema_fields")
    @classmethod
    def validate_schema(cls, v: Optional[List[FormField]]) -> Optional[List[FormField]]:
        if v is None:
            raise ValueError("schema must not be null")
        return check_schema(v)

    @field_validator("status")
    @classmethod
    def status_not_null(cls, v: Optional[FormStatus]) -> FormStatus:
        if v is None:
            raise ValueError("status must not be null")
        return v

    def changes(self) -> dict:
        """Stored-document fields this update sets"""
        return self.model_dump(exclude_unset=True, exclude={"version"}, by_alias=True, mode="json")

class FormDefinition(BaseModel):
    id: str
    owner_key: str
    name: Optional[str] = None
    status: FormStatus = FormStatus.ACTIVE
    schema_fields: List[FormField] = Field(alias="schema")
    version: int = 1
    created_at: datetime
    updated_at: datetime

    class Config:
        populate_by_name = True

    def field_names(self) -> List[str]:
        return [field.name for field in self.schema_fields]

    def to_public(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
