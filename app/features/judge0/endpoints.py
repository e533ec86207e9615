from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.adapters import judge0_client
from app.common.schemas import ActionResult
from app.features.judge0.languages import list_languages
from app.features.judge0.schemas import LanguageInfo, TestCase

router = APIRouter(prefix="/judge0", tags=["judge0"])


class BatchSubmissionPayload(BaseModel):
    source_code: Optional[str] = None
    language_id: Optional[int] = None
    testcases: List[TestCase] = Field(default_factory=list)


@router.get("/languages", response_model=List[LanguageInfo])
async def get_supported_languages():
    return list_languages()


@router.post("/submissions/batch", response_model=ActionResult, response_model_exclude_none=True)
async def create_submission(payload: BatchSubmissionPayload):
    return await judge0_client.create_submission(
        source_code=payload.source_code,
        language_id=payload.language_id,
        testcases=payload.testcases,
    )


@router.get("/submissions/{token}", response_model=ActionResult, response_model_exclude_none=True)
async def get_submission_result(token: str):
    return await judge0_client.get_submission_result(token)
