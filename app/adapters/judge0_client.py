from __future__ import annotations

import logging
from typing import Any, List, Optional

from app.common.schemas import ActionResult
from app.features.judge0.errors import TransportError, ValidationError
from app.features.judge0.schemas import TestCase
from app.features.judge0.service import Judge0Service, judge0_service

logger = logging.getLogger(__name__)


def _as_testcases(items: Optional[List[Any]]) -> List[TestCase]:
    out: List[TestCase] = []
    for it in items or []:
        out.append(it if isinstance(it, TestCase) else TestCase(**dict(it)))
    return out


async def create_submission(
    *,
    source_code: Optional[str],
    language_id: Optional[int],
    testcases: Optional[List[Any]] = None,
    service: Optional[Judge0Service] = None,
) -> ActionResult:
    """Create a batch submission and return ``{success, data: tokens}``.

    Never raises: every failure is folded into ``{success: False, message|error}``.
    """
    svc = service or judge0_service
    try:
        tokens = await svc.create_submission(source_code, language_id, _as_testcases(testcases))
        return ActionResult(success=True, data=tokens)
    except TransportError as exc:
        return ActionResult(success=False, message=exc.message)
    except ValidationError as exc:
        return ActionResult(success=False, error=exc.message)
    except Exception as exc:
        logger.exception("Unexpected failure creating submission")
        return ActionResult(success=False, error=str(exc))


async def get_submission_result(
    token: str,
    *,
    service: Optional[Judge0Service] = None,
) -> ActionResult:
    """Fetch and decode one submission result, returning ``{success, data: result}``."""
    svc = service or judge0_service
    try:
        result = await svc.get_submission_result(token)
        return ActionResult(success=True, data=result.model_dump(mode="json"))
    except TransportError as exc:
        return ActionResult(success=False, message=exc.message)
    except Exception as exc:
        logger.error("Error fetching submission result: %s", exc)
        return ActionResult(success=False, error=str(exc))


__all__ = ["create_submission", "get_submission_result"]
