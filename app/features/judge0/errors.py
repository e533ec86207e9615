from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .schemas import ExecutionResult


class CodeRunnerError(Exception):
    """Base class for failures raised while running code against Judge0."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CodeRunnerError, ValueError):
    """Missing source/language or other user-correctable input. No network call was made."""


class TransportError(CodeRunnerError):
    """Judge0 rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PollingTimeoutError(TransportError):
    """A token did not reach a terminal status within the configured attempts."""

    def __init__(self, token: str, attempts: int) -> None:
        super().__init__(f"Submission {token} did not finish after {attempts} attempts")
        self.token = token
        self.attempts = attempts


class CompilationError(CodeRunnerError):
    """First test case produced diagnostics; the remaining cases were not polled."""

    def __init__(self, result: "ExecutionResult") -> None:
        super().__init__("Compilation Error")
        self.result = result

    @property
    def output(self) -> str:
        return self.result.stderr or self.result.compile_output or "Compilation Error"


class UnknownError(CodeRunnerError):
    """Any other exception raised during a run."""


__all__ = [
    "CodeRunnerError",
    "ValidationError",
    "TransportError",
    "PollingTimeoutError",
    "CompilationError",
    "UnknownError",
]
