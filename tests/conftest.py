"""
Shared test fixtures and fakes.

Nothing here touches the network, apt or pip: commands go to
FakeRunner, PATH lookups to a dict, HTTP fetches to canned text.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from swarmprep.core.models.config import ProvisionConfig
from swarmprep.core.services.provision.orchestration.context import ProvisionContext

LISTING_HTML = """\
<html>
<head><title>Index of /dist/latest/</title></head>
<body>
<h1>Index of /dist/latest/</h1><hr><pre><a href="../">../</a>
<a href="docs/">docs/</a>
<a href="node-v20.11.0-aix-ppc64.tar.gz">node-v20.11.0-aix-ppc64.tar.gz</a>
<a href="node-v20.11.0-darwin-arm64.tar.gz">node-v20.11.0-darwin-arm64.tar.gz</a>
<a href="node-v20.11.0-linux-x64.tar.xz">node-v20.11.0-linux-x64.tar.xz</a>
</pre><hr></body>
</html>
"""

SETUP_SCRIPT = "#!/bin/bash\necho 'configured nodesource'\n"


class FakeRunner:
    """Stands in for ``run_command``; records every call.

    Responses are keyed by a substring of the joined command line.
    The first matching rule wins; unmatched commands succeed.
    """

    def __init__(self) -> None:
        self._rules: list[tuple[str, dict[str, Any], Callable[[list[str]], None] | None]] = []
        self.calls: list[dict[str, Any]] = []

    def set_response(
        self,
        match: str,
        stdout: str = "",
        side_effect: Callable[[list[str]], None] | None = None,
    ) -> None:
        self._rules.append((match, {"ok": True, "stdout": stdout, "elapsed_ms": 1}, side_effect))

    def set_failure(self, match: str, stderr: str = "boom", returncode: int = 1) -> None:
        self._rules.append((match, {
            "ok": False,
            "error": f"Command failed (exit {returncode})",
            "returncode": returncode,
            "stderr": stderr,
            "stdout": "",
        }, None))

    def __call__(self, cmd, **kwargs: Any) -> dict[str, Any]:
        argv = list(cmd)
        self.calls.append({"cmd": argv, **kwargs})
        line = " ".join(argv)
        for match, response, side_effect in self._rules:
            if match in line:
                if side_effect and not kwargs.get("dry_run"):
                    side_effect(argv)
                return dict(response)
        return {"ok": True, "stdout": "", "elapsed_ms": 1}

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def commands(self) -> list[str]:
        return [" ".join(c["cmd"]) for c in self.calls]

    def ran(self, fragment: str) -> bool:
        return any(fragment in line for line in self.commands())


def make_venv(argv: list[str]) -> None:
    """Side effect for ``python3 -m venv <dir>``: lay out a minimal venv."""
    venv = Path(argv[-1])
    (venv / "bin").mkdir(parents=True, exist_ok=True)
    (venv / "bin" / "python").write_text("#!/bin/sh\n")


def fake_fetch(listing: str = LISTING_HTML, script: str = SETUP_SCRIPT):
    def _fetch(url: str, timeout: int = 30) -> str:
        if "nodesource" in url:
            return script
        return listing
    return _fetch


@pytest.fixture
def runner() -> FakeRunner:
    """A runner where installs succeed and venv creation lays out files."""
    r = FakeRunner()
    r.set_response("-m venv", side_effect=make_venv)
    r.set_response("node -v", stdout="v20.11.0\n")
    r.set_response("npm -v", stdout="10.2.4\n")
    r.set_response("import torch", stdout="True\n")
    return r


@pytest.fixture
def installed_tools() -> set[str]:
    """Binaries the fake PATH resolves. Tests add or remove names."""
    return {"curl", "node", "npm", "python3"}


@pytest.fixture
def make_context(tmp_path: Path, runner: FakeRunner, installed_tools: set[str]):
    """Factory for a ProvisionContext wired to the fakes."""

    def _make(
        config: ProvisionConfig | None = None,
        listing: str = LISTING_HTML,
        dry_run: bool = False,
    ) -> ProvisionContext:
        return ProvisionContext(
            config=config or ProvisionConfig(),
            work_dir=tmp_path,
            dry_run=dry_run,
            runner=runner,
            which=lambda name: f"/usr/bin/{name}" if name in installed_tools else None,
            fetch=fake_fetch(listing=listing),
        )

    return _make
