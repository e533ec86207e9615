import asyncio
import base64
import binascii
import logging
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import urlparse

import httpx

from app.Core.config import get_settings
from .annotations import project
from .diagnostics import parse_diagnostics
from .errors import TransportError, ValidationError
from .schemas import (
    Diagnostic,
    ExecutionResult,
    Judge0BatchRequest,
    Judge0ExecutionResult,
    Judge0SubmissionRequest,
    Severity,
    TestCase,
)

RESULT_FIELDS = "stdout,stderr,status,time,memory,expected_output,compile_output,finished_at,message"
ENCODED_FIELDS = ("stdout", "stderr", "message", "compile_output", "expected_output")
GENERIC_OUTPUT_FILE = "output"
GENERIC_ERROR_TEXT = "Compilation/Runtime Error"


def decode_base64(value: Optional[str]) -> Optional[str]:
    """Decode a Judge0 base64 text field; bytes that are not valid UTF-8 are replaced."""
    if not value:
        return None
    # Judge0 wraps encoded output at 60 columns
    compact = value.replace("\r", "").replace("\n", "")
    try:
        raw = base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError):
        # not base64; pass the text through unchanged
        return value
    return raw.decode("utf-8", errors="replace")


def decode_result(payload: Dict[str, Any]) -> ExecutionResult:
    """Turn a raw (encoded) result payload into a decoded ExecutionResult without diagnostics."""
    raw = Judge0ExecutionResult(**payload)
    data = raw.model_dump()
    for field in ENCODED_FIELDS:
        data[field] = decode_base64(data.get(field))
    return ExecutionResult(**data)


def attach_diagnostics(result: ExecutionResult) -> ExecutionResult:
    """Parse compiler (then stderr) output into diagnostics, annotations and markers.

    Only done when Judge0 reported compile output; otherwise the program compiled and
    any failure is a runtime/logical one visible through status, stdout and stderr.
    """
    if result.compile_output is None:
        return result

    diagnostics = parse_diagnostics(result.compile_output)
    if not diagnostics and result.stderr:
        diagnostics = parse_diagnostics(result.stderr)

    if not diagnostics and (result.compile_output or result.stderr):
        output = result.compile_output or result.stderr or ""
        first_line = output.split("\n")[0]
        diagnostics = [
            Diagnostic(
                file=GENERIC_OUTPUT_FILE,
                row=1,
                column=0,
                severity=Severity.error,
                message=first_line or GENERIC_ERROR_TEXT,
            )
        ]

    annotations, markers = project(diagnostics)
    return result.model_copy(update={
        "diagnostics": diagnostics,
        "annotations": annotations,
        "markers": markers,
    })


class Judge0Service:
    def __init__(self, base_url: Optional[str] = None):
        self.settings = get_settings()
        # Normalise base URL: prefer explicit argument, then JUDGE0_URI / JUDGE0_BASE_URL
        base = (base_url if base_url is not None else self.settings.judge0_api_url or "").strip()
        if base and not base.startswith("http://") and not base.startswith("https://"):
            # assume http if scheme omitted
            base = "http://" + base
        # strip trailing slash to make joining paths predictable
        self.base_url = base.rstrip("/")
        self.headers = {"Content-Type": "application/json"}
        if self.settings.judge0_api_key and self.settings.judge0_host:
            self.headers.update({
                "X-RapidAPI-Key": self.settings.judge0_api_key,
                "X-RapidAPI-Host": self.settings.judge0_host,
            })
        self._logger = logging.getLogger(__name__)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Perform an HTTP request against the configured Judge0 base URL.

        Connection failures are retried briefly and then surfaced as TransportError;
        HTTP error statuses are returned to the caller untouched.
        """
        if not self.base_url:
            raise TransportError("Judge0 base URL is not configured (JUDGE0_URI / JUDGE0_BASE_URL).")
        if not path.startswith("/"):
            path = "/" + path
        url = self.base_url + path

        def _mask_headers(h: dict) -> dict:
            masked = {}
            for k, v in (h or {}).items():
                if k.lower() in ("x-rapidapi-key",):
                    masked[k] = "[REDACTED]"
                else:
                    masked[k] = v
            return masked

        self._logger.debug("Judge0 request: %s %s headers=%s", method, url, _mask_headers(self.headers))
        timeout = httpx.Timeout(connect=3.0, read=self.settings.judge0_timeout_s, write=5.0, pool=5.0)
        max_retries = 3
        for attempt in range(max_retries):
            try:
                async with httpx.AsyncClient(timeout=timeout) as client:
                    return await client.request(method, url, headers=self.headers, **kwargs)
            except (httpx.ConnectTimeout, httpx.ConnectError) as e:
                if attempt < max_retries - 1:
                    backoff = 0.5 * (attempt + 1)
                    await asyncio.sleep(backoff)
                    continue
                host = urlparse(self.base_url).netloc or self.base_url
                raise TransportError(f"Failed to connect to Judge0 at {host}: {e}") from e
            except httpx.HTTPError as e:
                raise TransportError(f"Judge0 request failed: {e}") from e

    @staticmethod
    def build_batch(source_code: str, language_id: int, testcases: Sequence[TestCase]) -> Judge0BatchRequest:
        return Judge0BatchRequest(submissions=[
            Judge0SubmissionRequest(
                source_code=source_code,
                language_id=language_id,
                stdin=tc.stdin,
                expected_output=tc.expected_output,
            )
            for tc in testcases
        ])

    async def create_submission(
        self,
        source_code: Optional[str],
        language_id: Optional[int],
        testcases: Sequence[TestCase],
    ) -> List[str]:
        """Submit one batch item per test case; returns tokens in test-case order."""
        if not source_code or not language_id:
            raise ValidationError("Code and Language ID are required")

        batch = self.build_batch(source_code, language_id, testcases)
        resp = await self._request(
            "POST",
            "/submissions/batch?base64_encoded=false&wait=false",
            # stdin/expected_output must be sent as null, not dropped
            json=batch.model_dump(),
        )
        if not resp.is_success:
            self._logger.warning("Batch submit rejected: %s %s", resp.status_code, resp.text[:200])
            raise TransportError(f"{resp.status_code} Unable to create submission", status_code=resp.status_code)

        data = resp.json()
        items = data.get("submissions", []) if isinstance(data, dict) else data
        tokens: List[str] = []
        for item in items or []:
            tok = item.get("token") if isinstance(item, dict) else None
            if tok:
                tokens.append(tok)
        if len(tokens) != len(batch.submissions):
            raise TransportError(
                f"Token count mismatch in batch response ({len(tokens)} of {len(batch.submissions)})",
                status_code=resp.status_code,
            )
        self._logger.info("Created batch of %d submissions", len(tokens))
        return tokens

    async def get_submission_result(self, token: str) -> ExecutionResult:
        resp = await self._request(
            "GET",
            f"/submissions/{token}?base64_encoded=true&fields={RESULT_FIELDS}",
        )
        if not resp.is_success:
            self._logger.warning("Result fetch for %s rejected: %s", token, resp.status_code)
            raise TransportError(f"{resp.status_code} Unable to fetch submission result", status_code=resp.status_code)

        result = decode_result(resp.json())
        result = result.model_copy(update={"token": token})
        return attach_diagnostics(result)


judge0_service = Judge0Service()
