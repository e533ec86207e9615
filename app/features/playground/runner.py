"""Run a RunSession's code against all of its test cases on Judge0.

Flow: batch-submit every test case, poll the first token alone, and stop there
if it produced diagnostics (a compile error is global, so the other cases
cannot tell us anything new). Otherwise poll the remaining tokens concurrently
and keep results in test-case order.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from pydantic import BaseModel, Field

from app.Core.config import get_settings
from app.features.judge0.errors import (
    CodeRunnerError,
    CompilationError,
    PollingTimeoutError,
    TransportError,
    UnknownError,
    ValidationError,
)
from app.features.judge0.languages import get_language
from app.features.judge0.schemas import ExecutionResult
from app.features.judge0.service import Judge0Service, judge0_service

from .session import RunError, RunSession, RunState

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]

# marks "take it from settings"; an explicit None means unbounded polling
_FROM_SETTINGS: Any = object()


class RunOutcome(BaseModel):
    state: RunState
    results: List[ExecutionResult] = Field(default_factory=list)
    error: Optional[RunError] = None
    passed_count: int = 0
    total: int = 0
    summary: Optional[str] = None


def summarize(passed: int, total: int) -> str:
    if passed == total:
        return "All test cases passed!"
    return f"{passed}/{total} test cases passed"


class CodeRunner:
    def __init__(
        self,
        service: Optional[Judge0Service] = None,
        *,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = _FROM_SETTINGS,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        settings = get_settings()
        self.service = service or judge0_service
        self.poll_interval = settings.judge0_poll_interval_s if poll_interval is None else poll_interval
        # None means poll until the judge reports a terminal status
        self.max_attempts: Optional[int] = (
            settings.judge0_poll_max_attempts if max_attempts is _FROM_SETTINGS else max_attempts
        )
        self._sleep = sleep

    async def poll(self, token: str) -> ExecutionResult:
        """Fetch ``token`` until its status is terminal. Transport errors are not retried."""
        attempt = 0
        while True:
            result = await self.service.get_submission_result(token)
            attempt += 1
            if result.is_terminal:
                return result
            if self.max_attempts is not None and attempt >= self.max_attempts:
                raise PollingTimeoutError(token, attempt)
            await self._sleep(self.poll_interval)

    async def _poll_remaining(self, tokens: List[str]) -> List[ExecutionResult]:
        tasks = [asyncio.ensure_future(self.poll(tok)) for tok in tokens]
        try:
            # gather keeps input order regardless of completion order
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            # let cancelled siblings unwind before the run is reported
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    def validate(self, session: RunSession) -> int:
        """Return the Judge0 language id for the session or raise ValidationError."""
        if not session.code or not session.code.strip():
            raise ValidationError("Please write some code first")
        if not session.testcases:
            raise ValidationError("Please add at least one test case")
        language = get_language(session.language)
        if language is None or session.language not in session.allowed_languages:
            raise ValidationError("Unsupported programming language")
        return language.judge0_id

    async def run_code(self, session: RunSession) -> RunOutcome:
        """Run the session's code against its test cases and record the outcome on it.

        Raises ValidationError (session untouched, no network call) for blank code,
        missing test cases or an unsupported language. Every other failure is caught,
        leaves the session ``failed`` and is reported on the returned outcome.
        """
        language_id = self.validate(session)
        session.begin_run()
        logger.info(
            "Running code on Judge0",
            extra={"language": session.language, "language_id": language_id, "testcases": len(session.testcases)},
        )
        try:
            tokens = await self.service.create_submission(session.code, language_id, session.testcases)
            if not tokens:
                raise TransportError("Judge0 returned no submission tokens")

            session.transition(RunState.polling_first)
            first = await self.poll(tokens[0])

            if first.has_diagnostics:
                raise CompilationError(first)

            session.transition(RunState.polling_remaining)
            rest = await self._poll_remaining(tokens[1:])
            results = [first, *rest]

            session.transition(RunState.done)
            session.clear_annotations()
            session.clear_markers()
            session.set_results(results)
            passed = session.passed_count
            logger.info("Run finished: %d/%d accepted", passed, len(results))
            return RunOutcome(
                state=session.state,
                results=results,
                passed_count=passed,
                total=len(results),
                summary=summarize(passed, len(results)),
            )
        except CompilationError as exc:
            session.transition(RunState.done_with_diagnostics)
            session.set_annotations(exc.result.annotations)
            session.set_markers(exc.result.markers)
            session.set_error(RunError(message=exc.message, stderr=exc.output))
            session.results = [exc.result]
            logger.info("Compilation failed; %d remaining case(s) skipped", len(session.testcases) - 1)
            return RunOutcome(
                state=session.state,
                results=[exc.result],
                error=session.error,
                total=len(session.testcases),
                summary="Compilation Error - Check your code syntax",
            )
        except Exception as exc:
            failure = exc if isinstance(exc, CodeRunnerError) else UnknownError(str(exc) or type(exc).__name__)
            if isinstance(failure, UnknownError):
                logger.exception("Code execution failed")
            else:
                logger.warning("Code execution failed: %s", failure.message)
            session.transition(RunState.failed)
            session.annotate_failure(failure.message or "Code execution failed")
            session.set_error(RunError(message=failure.message or "Code execution failed"))
            return RunOutcome(
                state=session.state,
                error=session.error,
                total=len(session.testcases),
                summary=f"Code execution failed: {failure.message}",
            )
        finally:
            session.finish_run()


code_runner = CodeRunner()

__all__ = ["CodeRunner", "RunOutcome", "code_runner", "summarize"]
