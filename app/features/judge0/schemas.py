from __future__ import annotations

from datetime import datetime
from enum import Enum, IntEnum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

# Largest integer the editor accepts as a column; markers use it for "end of line".
END_OF_LINE = 2**53 - 1


class StatusId(IntEnum):
    IN_QUEUE = 1
    PROCESSING = 2
    ACCEPTED = 3
    WRONG_ANSWER = 4
    TIME_LIMIT_EXCEEDED = 5
    COMPILATION_ERROR = 6
    RUNTIME_ERROR_SIGSEGV = 7
    RUNTIME_ERROR_SIGXFSZ = 8
    RUNTIME_ERROR_SIGFPE = 9
    RUNTIME_ERROR_SIGABRT = 10
    RUNTIME_ERROR_NZEC = 11
    RUNTIME_ERROR_OTHER = 12
    INTERNAL_ERROR = 13
    EXEC_FORMAT_ERROR = 14


class Severity(str, Enum):
    error = "error"
    warning = "warning"


class TestCase(BaseModel):
    __test__ = False  # not a pytest class

    # None and "" are distinct: None is sent as null ("no stdin"), "" as an empty stdin.
    stdin: Optional[str] = None
    expected_output: Optional[str] = None


class SourceSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    source_code: str
    language_id: int
    testcases: List[TestCase] = Field(default_factory=list)


class Judge0SubmissionRequest(BaseModel):
    source_code: str
    language_id: int
    stdin: Optional[str] = None
    expected_output: Optional[str] = None


class Judge0BatchRequest(BaseModel):
    submissions: List[Judge0SubmissionRequest]


class Judge0Status(BaseModel):
    id: int
    description: str = ""

    @property
    def label(self) -> str:
        return self.description

    @property
    def is_terminal(self) -> bool:
        return self.id >= StatusId.ACCEPTED


class Judge0ExecutionResult(BaseModel):
    """Raw GET /submissions/{token} payload; text fields are still base64 encoded."""

    token: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    message: Optional[str] = None
    expected_output: Optional[str] = None
    time: Optional[float] = None
    memory: Optional[int] = None
    finished_at: Optional[datetime] = None
    status: Judge0Status


class Diagnostic(BaseModel):
    file: str
    row: int
    column: int = 0
    severity: Severity = Severity.error
    message: str


class Annotation(BaseModel):
    row: int
    column: int
    type: Severity
    text: str


class Marker(BaseModel):
    start_row: int
    start_col: int
    end_row: int
    end_col: int
    class_name: str = "error-marker"
    type: str = "text"


class ExecutionResult(BaseModel):
    token: Optional[str] = None
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    compile_output: Optional[str] = None
    message: Optional[str] = None
    expected_output: Optional[str] = None
    time: Optional[float] = None
    memory: Optional[int] = None
    finished_at: Optional[datetime] = None
    status: Judge0Status
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    annotations: List[Annotation] = Field(default_factory=list)
    markers: List[Marker] = Field(default_factory=list)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def accepted(self) -> bool:
        return self.status.id == StatusId.ACCEPTED

    @property
    def has_diagnostics(self) -> bool:
        return bool(self.diagnostics)

    @property
    def runtime_error(self) -> bool:
        """Finished but neither accepted, a wrong answer nor a compile failure."""
        return self.is_terminal and self.status.id not in (
            StatusId.ACCEPTED,
            StatusId.WRONG_ANSWER,
            StatusId.COMPILATION_ERROR,
        )


class LanguageInfo(BaseModel):
    id: int
    slug: str
    name: str
    mode: str
