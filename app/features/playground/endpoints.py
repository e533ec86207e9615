from __future__ import annotations

from fastapi import APIRouter, HTTPException

from app.features.judge0.errors import ValidationError
from app.features.playground import runner as runner_module
from app.features.playground.schemas import RunRequest, RunResponse
from app.features.playground.session import RunSession

router = APIRouter(prefix="/playground", tags=["playground"])


@router.post("/run", response_model=RunResponse, summary="Run code against every test case")
async def run_code(payload: RunRequest):
    session = RunSession(
        code=payload.source_code,
        language=payload.language,
        allowed_languages=payload.allowed_languages,
        testcases=payload.testcases,
    )
    try:
        outcome = await runner_module.code_runner.run_code(session)
    except ValidationError as exc:
        raise HTTPException(status_code=422, detail=exc.message) from exc
    return RunResponse(
        state=outcome.state,
        results=outcome.results,
        error=outcome.error,
        annotations=session.annotations,
        markers=session.markers,
        passed_count=outcome.passed_count,
        total=outcome.total,
        summary=outcome.summary,
    )
