from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from models.claims import Claim
from models.questions import Question


class ExtractionInput(BaseModel):
    """Claims and questions generated for one document."""
    doc_id: str = ""
    doc_subject: str = ""
    doc_date: str | None = None
    claims: list[Claim] = Field(default_factory=list)
    questions: list[Question] = Field(default_factory=list)

    @classmethod
    def from_json_file(cls, path: Path | str) -> ExtractionInput:
        with open(path, encoding="utf-8") as f:
            return cls.model_validate(json.load(f))
