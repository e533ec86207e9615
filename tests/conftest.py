import os
import sys

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Settings are cached on first import; pin a judge URL and unbounded polling for tests.
os.environ.setdefault("JUDGE0_URI", "http://judge0.test")
os.environ.pop("JUDGE0_POLL_MAX_ATTEMPTS", None)
os.environ.pop("JUDGE0_KEY", None)
