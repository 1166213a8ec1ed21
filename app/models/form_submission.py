"""
Models for storing form submissions
"""
from pydantic import BaseModel, Field
from typing import Dict, Any, Optional
from datetime import datetime

class SubmissionCreate(BaseModel):
    values: Dict[str, Any] = Field(default_factory=dict)
    source_url: Optional[str] = None

class Submission(BaseModel):
    id: str
    form_id: str
    values: Dict[str, Any]
    source_url: Optional[str] = None
    submitted_at: datetime

    def to_public(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
