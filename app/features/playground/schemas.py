from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from app.features.judge0.schemas import Annotation, ExecutionResult, Marker, TestCase
from .session import RunError, RunState


class RunRequest(BaseModel):
    source_code: str
    language: str
    testcases: List[TestCase] = Field(default_factory=list)
    allowed_languages: Optional[List[str]] = None


class RunResponse(BaseModel):
    state: RunState
    results: List[ExecutionResult] = Field(default_factory=list)
    error: Optional[RunError] = None
    annotations: List[Annotation] = Field(default_factory=list)
    markers: List[Marker] = Field(default_factory=list)
    passed_count: int = 0
    total: int = 0
    summary: Optional[str] = None
