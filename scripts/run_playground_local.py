"""Utility script to exercise the /playground/run endpoint on a local dev server.

Usage:
    python scripts/run_playground_local.py --host http://127.0.0.1:8000 \
        --language python --source "print(input())" --case "hi=hi" --case "2=3"

Each ``--case`` is ``stdin=expected``; either side may be empty. Prints the run
state, per-case status and any editor annotations.
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any

import httpx


DEFAULT_HOST = "http://127.0.0.1:8000"
DEFAULT_SOURCE = "print('Hello Judge0!')"
DEFAULT_LANGUAGE = "python"


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Smoke test for /playground/run endpoint")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Base URL of the backend (default: %(default)s)")
    parser.add_argument("--source", default=DEFAULT_SOURCE, help="Source code to run (default: %(default)s)")
    parser.add_argument("--language", default=DEFAULT_LANGUAGE, help="Language slug (default: %(default)s)")
    parser.add_argument(
        "--case",
        action="append",
        default=[],
        help="Test case as stdin=expected; repeat for several cases",
    )
    parser.add_argument("--timeout", type=float, default=120.0, help="HTTP timeout in seconds (default: %(default)s)")
    return parser.parse_args()


def _testcase(raw: str) -> dict[str, Any]:
    stdin, _, expected = raw.partition("=")
    return {"stdin": stdin or None, "expected_output": expected or None}


def main() -> int:
    args = parse_args()
    url = args.host.rstrip("/") + "/playground/run"
    payload: dict[str, Any] = {
        "source_code": args.source,
        "language": args.language,
        "testcases": [_testcase(c) for c in args.case] or [{"stdin": None, "expected_output": None}],
    }

    print(f"Running {len(payload['testcases'])} case(s) via {url} ...")
    try:
        with httpx.Client(timeout=args.timeout) as client:
            response = client.post(url, json=payload)
    except httpx.HTTPError as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1

    print(f"HTTP {response.status_code}")
    try:
        data = response.json()
    except ValueError:
        print("Response body (non-JSON):")
        print(response.text)
        return 1

    if response.status_code >= 400:
        print(json.dumps(data, indent=2))
        return 1

    print(f"state: {data.get('state')}  summary: {data.get('summary')}")
    for idx, result in enumerate(data.get("results") or []):
        status = result.get("status") or {}
        print(f"  case {idx}: {status.get('id')} {status.get('description')} stdout={result.get('stdout')!r}")
    for ann in data.get("annotations") or []:
        print(f"  line {ann['row'] + 1}:{ann['column'] + 1} [{ann['type']}] {ann['text']}")
    return 0 if data.get("state") == "done" else 1


if __name__ == "__main__":
    raise SystemExit(main())
