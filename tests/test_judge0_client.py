import asyncio

from app.adapters import judge0_client
from app.features.judge0.errors import TransportError, ValidationError
from app.features.judge0.schemas import ExecutionResult, Judge0Status


class _Service:
    def __init__(self, tokens=None, result=None, error=None):
        self.tokens = tokens or []
        self.result = result
        self.error = error
        self.received = None

    async def create_submission(self, source_code, language_id, testcases):
        self.received = (source_code, language_id, testcases)
        if self.error:
            raise self.error
        return self.tokens

    async def get_submission_result(self, token):
        if self.error:
            raise self.error
        return self.result


def test_create_submission_success_envelope():
    svc = _Service(tokens=["t1", "t2"])

    res = asyncio.run(judge0_client.create_submission(
        source_code="print(1)",
        language_id=71,
        testcases=[{"stdin": "1", "expected_output": "1"}, {"stdin": None}],
        service=svc,
    ))

    assert res.success is True
    assert res.data == ["t1", "t2"]
    source, language_id, testcases = svc.received
    assert [tc.stdin for tc in testcases] == ["1", None]


def test_create_submission_transport_failure_envelope():
    svc = _Service(error=TransportError("503 Unable to create submission", status_code=503))

    res = asyncio.run(judge0_client.create_submission(source_code="x", language_id=71, testcases=[{}], service=svc))

    assert res.success is False
    assert res.message == "503 Unable to create submission"
    assert res.error is None


def test_create_submission_validation_envelope():
    svc = _Service(error=ValidationError("Code and Language ID are required"))

    res = asyncio.run(judge0_client.create_submission(source_code="", language_id=None, service=svc))

    assert res.success is False
    assert res.error == "Code and Language ID are required"


def test_get_submission_result_envelopes():
    ok = _Service(result=ExecutionResult(token="t", stdout="hi", status=Judge0Status(id=3, description="Accepted")))
    res = asyncio.run(judge0_client.get_submission_result("t", service=ok))
    assert res.success is True
    assert res.data["stdout"] == "hi"
    assert res.data["status"] == {"id": 3, "description": "Accepted"}

    broken = _Service(error=RuntimeError("boom"))
    res = asyncio.run(judge0_client.get_submission_result("t", service=broken))
    assert res.success is False
    assert res.error == "boom"
