"""Per-caller execution state for one editor + test-case panel.

A RunSession is created by whoever drives the UI (or an HTTP request) and handed
to the runner; nothing here is process-global. Results stay index-aligned with
``testcases``.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from app.features.judge0.errors import ValidationError
from app.features.judge0.languages import ALL_LANGUAGES, DEFAULT_LANGUAGE, default_code
from app.features.judge0.schemas import Annotation, ExecutionResult, Marker, Severity, TestCase


class RunState(str, Enum):
    idle = "idle"
    submitting = "submitting"
    polling_first = "polling_first"
    polling_remaining = "polling_remaining"
    done = "done"
    done_with_diagnostics = "done_with_diagnostics"
    failed = "failed"


_TRANSITIONS = {
    RunState.idle: {RunState.submitting},
    RunState.submitting: {RunState.polling_first, RunState.failed},
    RunState.polling_first: {RunState.done_with_diagnostics, RunState.polling_remaining, RunState.failed},
    RunState.polling_remaining: {RunState.done, RunState.failed},
}
# A finished run may start the next one.
for _final in (RunState.done, RunState.done_with_diagnostics, RunState.failed):
    _TRANSITIONS[_final] = {RunState.submitting}


class RunError(BaseModel):
    message: str
    stderr: str = ""


class RunSession:
    def __init__(
        self,
        code: str = "",
        language: str = DEFAULT_LANGUAGE,
        allowed_languages: Optional[List[str]] = None,
        testcases: Optional[List[TestCase]] = None,
    ) -> None:
        self.code = code
        self.language = language
        self.allowed_languages: List[str] = list(allowed_languages or ALL_LANGUAGES)
        self.testcases: List[TestCase] = list(testcases or [])
        self.active_testcase = 0
        self.results: List[ExecutionResult] = []
        self.error: Optional[RunError] = None
        self.annotations: List[Annotation] = []
        self.markers: List[Marker] = []
        self.loading = False
        self.state = RunState.idle

    # ---- state machine ----
    def transition(self, target: RunState) -> None:
        if target not in _TRANSITIONS.get(self.state, set()):
            raise ValueError(f"Invalid run transition {self.state.value} -> {target.value}")
        self.state = target

    def begin_run(self) -> None:
        if self.loading:
            raise ValidationError("A run is already in progress")
        self.transition(RunState.submitting)
        self.loading = True
        self.clear_annotations()
        self.clear_markers()
        self.clear_results()

    def finish_run(self) -> None:
        self.loading = False

    # ---- editor ----
    def initialize_editor(self, initial_code: str = "", allowed_languages: Optional[List[str]] = None) -> None:
        self.allowed_languages = list(allowed_languages or ALL_LANGUAGES)
        if self.language not in self.allowed_languages:
            self.language = self.allowed_languages[0] if self.allowed_languages else DEFAULT_LANGUAGE
        self.code = initial_code or default_code(self.language)
        self.loading = False
        self.annotations = []
        self.markers = []

    def set_code(self, code: str) -> None:
        self.code = code

    def set_language(self, language: str) -> None:
        """Switch language, swapping in its starter code if the editor is empty or untouched."""
        previous_default = default_code(self.language)
        self.language = language
        if not self.code or self.code == previous_default:
            self.code = default_code(language)

    def set_allowed_languages(self, languages: List[str]) -> None:
        self.allowed_languages = list(languages)
        if self.language not in self.allowed_languages:
            self.language = self.allowed_languages[0] if self.allowed_languages else DEFAULT_LANGUAGE
            self.code = default_code(self.language)

    def reset_code(self) -> None:
        self.code = default_code(self.language)
        self.annotations = []
        self.markers = []

    # ---- annotations / markers ----
    def set_annotations(self, annotations: List[Annotation]) -> None:
        self.annotations = list(annotations)

    def add_annotation(self, annotation: Annotation) -> None:
        self.annotations.append(annotation)

    def clear_annotations(self) -> None:
        self.annotations = []

    def set_markers(self, markers: List[Marker]) -> None:
        self.markers = list(markers)

    def add_marker(self, marker: Marker) -> None:
        self.markers.append(marker)

    def clear_markers(self) -> None:
        self.markers = []

    def annotate_failure(self, text: str) -> None:
        self.annotations = [Annotation(row=0, column=0, type=Severity.error, text=text)]
        self.markers = []

    # ---- test cases ----
    def initialize_testcases(self, testcases: Optional[List[TestCase]] = None) -> None:
        self.testcases = list(testcases) if testcases else [TestCase()]
        self.active_testcase = 0
        self.results = []
        self.error = None
        self.loading = False

    def set_testcases(self, testcases: List[TestCase]) -> None:
        self.testcases = list(testcases)
        self.active_testcase = 0
        self.results = []
        self.error = None

    def add_testcase(self) -> None:
        self.testcases.append(TestCase())

    def remove_testcase(self, index: int) -> None:
        # at least one test case always remains
        if len(self.testcases) <= 1 or not 0 <= index < len(self.testcases):
            return
        del self.testcases[index]
        if self.active_testcase >= len(self.testcases):
            self.active_testcase = len(self.testcases) - 1
        if index < len(self.results):
            del self.results[index]

    def update_testcase(self, index: int, field: str, value: Optional[str]) -> None:
        if field not in ("stdin", "expected_output"):
            raise ValueError(f"Unknown test case field: {field}")
        if 0 <= index < len(self.testcases):
            self.testcases[index] = self.testcases[index].model_copy(update={field: value})

    def set_active_testcase(self, index: int) -> None:
        if 0 <= index < len(self.testcases):
            self.active_testcase = index

    # ---- results ----
    def set_results(self, results: List[ExecutionResult]) -> None:
        self.results = list(results)
        self.error = None

    def set_error(self, error: RunError) -> None:
        self.error = error
        self.results = []

    def clear_results(self) -> None:
        self.results = []
        self.error = None

    @property
    def passed_count(self) -> int:
        return sum(1 for r in self.results if r.accepted)
