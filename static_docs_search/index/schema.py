from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class HeadingInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, le=6)
    text: str
    line: int = Field(ge=1)        # 1-based line in the raw file


class Chunk(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str
    heading_path: List[str] = Field(alias="headingPath", min_length=1)
    start_line: int = Field(alias="startLine", ge=1)
    end_line: Optional[int] = Field(default=None, alias="endLine", ge=1)
    # sentence range owned by this chunk; in-memory only
    sentence_start: Optional[int] = Field(default=None, exclude=True)
    sentence_end: Optional[int] = Field(default=None, exclude=True)


class DocumentChunkRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    chunk: Chunk

    def to_json_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class SearchHit(BaseModel):
    doc: DocumentChunkRecord
    score: float

    def to_json_dict(self) -> dict:
        return {"doc": self.doc.to_json_dict(), "score": self.score}


class PersistedIndex(BaseModel):
    """Wire shape of the JSON index artifact."""

    model_config = ConfigDict(extra="ignore")

    docs: List[DocumentChunkRecord]
    vocabulary: List[str]
    idf: List[float]
    tfidf: List[List[float]]
    tokenizer: Optional[str] = None

    @field_validator("vocabulary")
    @classmethod
    def _distinct_terms(cls, v: List[str]) -> List[str]:
        if len(set(v)) != len(v):
            raise ValueError("vocabulary contains duplicate terms")
        return v

    @model_validator(mode="after")
    def _aligned(self) -> "PersistedIndex":
        dim = len(self.vocabulary)
        if len(self.idf) != dim:
            raise ValueError(f"idf has {len(self.idf)} entries, vocabulary has {dim}")
        if len(self.tfidf) != len(self.docs):
            raise ValueError(f"tfidf has {len(self.tfidf)} rows, docs has {len(self.docs)}")
        for i, row in enumerate(self.tfidf):
            if len(row) != dim:
                raise ValueError(f"tfidf row {i} has {len(row)} components, expected {dim}")
        return self
