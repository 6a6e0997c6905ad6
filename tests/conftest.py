import subprocess
from typing import Callable, List, Optional

import pytest

from simplefs_bootstrap.lib import command
from simplefs_bootstrap.logging_utils import reset_logging


class FakeRunner:
    """Stands in for subprocess.run and records every argv it is given."""

    def __init__(self):
        self.calls: List[dict] = []
        self.rules: List[tuple] = []

    def fail_when(self, predicate: Callable[[List[str]], bool], returncode: int, stderr: str = "") -> None:
        self.rules.append((predicate, returncode, "", stderr))

    def reply_when(self, predicate: Callable[[List[str]], bool], stdout) -> None:
        self.rules.append((predicate, 0, stdout, ""))

    def argvs(self) -> List[List[str]]:
        return [c["argv"] for c in self.calls]

    def find(self, word: str) -> Optional[int]:
        for i, argv in enumerate(self.argvs()):
            if any(word in a for a in argv):
                return i
        return None

    def __call__(self, argv, *, input=None, text=None, stdout=None, stderr=None, env=None, **kw):
        self.calls.append(
            {"argv": list(argv), "input": input, "env": env, "captured": stdout is not None, "text": bool(text)}
        )
        out, err, rc = "", "", 0
        for predicate, code, o, e in self.rules:
            if predicate(list(argv)):
                out, err, rc = o, e, code
                break
        if not text:
            out = out.encode("utf-8") if isinstance(out, str) else out
            err = err.encode("utf-8")
        return subprocess.CompletedProcess(argv, rc, out if stdout else None, err if stderr else None)


@pytest.fixture
def fake_run(monkeypatch):
    runner = FakeRunner()
    monkeypatch.setattr(command.subprocess, "run", runner)
    return runner


@pytest.fixture(autouse=True)
def clean_logging():
    yield
    reset_logging()
