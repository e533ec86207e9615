from fastapi.testclient import TestClient

from app.adapters import judge0_client
from app.features.judge0.errors import TransportError
from app.features.judge0.schemas import ExecutionResult, Judge0Status
from app.features.playground import runner as runner_module
from app.features.playground.runner import CodeRunner
from app.main import app

client = TestClient(app)


class _Judge:
    def __init__(self, create_error=None):
        self.create_error = create_error
        self.batches = []
        self.fetched = []

    async def create_submission(self, source_code, language_id, testcases):
        self.batches.append((source_code, language_id, testcases))
        if self.create_error:
            raise self.create_error
        return [f"tok-{i}" for i in range(len(testcases))]

    async def get_submission_result(self, token):
        self.fetched.append(token)
        return ExecutionResult(token=token, stdout="ok\n", status=Judge0Status(id=3, description="Accepted"))


async def _no_sleep(delay):
    return None


def test_root_and_health():
    assert client.get("/").json()["status"] == "ok"
    body = client.get("/healthz").json()
    assert body["components"]["judge0"] == "configured"
    assert "X-Request-Id" in client.get("/healthz").headers


def test_languages():
    data = client.get("/judge0/languages").json()
    by_slug = {lang["slug"]: lang["id"] for lang in data}
    assert by_slug["cpp"] == 54
    assert by_slug["python"] == 71
    assert by_slug["sql"] == 82


def test_batch_submission_route(monkeypatch):
    judge = _Judge()
    monkeypatch.setattr(judge0_client, "judge0_service", judge)

    resp = client.post(
        "/judge0/submissions/batch",
        json={"source_code": "print(1)", "language_id": 71, "testcases": [{"stdin": "1"}, {}]},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "data": ["tok-0", "tok-1"]}
    assert [tc.stdin for tc in judge.batches[0][2]] == ["1", None]


def test_batch_submission_route_reports_judge_rejection(monkeypatch):
    monkeypatch.setattr(
        judge0_client,
        "judge0_service",
        _Judge(create_error=TransportError("503 Unable to create submission", status_code=503)),
    )

    resp = client.post("/judge0/submissions/batch", json={"source_code": "x", "language_id": 71, "testcases": [{}]})

    assert resp.json() == {"success": False, "message": "503 Unable to create submission"}


def test_submission_result_route(monkeypatch):
    monkeypatch.setattr(judge0_client, "judge0_service", _Judge())

    body = client.get("/judge0/submissions/tok-9").json()

    assert body["success"] is True
    assert body["data"]["token"] == "tok-9"
    assert body["data"]["status"]["id"] == 3


def test_playground_run(monkeypatch):
    judge = _Judge()
    monkeypatch.setattr(runner_module, "code_runner", CodeRunner(service=judge, sleep=_no_sleep))

    resp = client.post(
        "/playground/run",
        json={
            "source_code": "print(input())",
            "language": "python",
            "testcases": [{"stdin": "a", "expected_output": "a"}, {"stdin": "b", "expected_output": "b"}],
        },
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["state"] == "done"
    assert [r["token"] for r in body["results"]] == ["tok-0", "tok-1"]
    assert body["summary"] == "All test cases passed!"
    assert body["annotations"] == []


def test_playground_run_validation_error(monkeypatch):
    judge = _Judge()
    monkeypatch.setattr(runner_module, "code_runner", CodeRunner(service=judge, sleep=_no_sleep))

    resp = client.post("/playground/run", json={"source_code": "  ", "language": "python", "testcases": [{}]})

    assert resp.status_code == 422
    assert resp.json()["detail"] == "Please write some code first"
    assert judge.batches == []
