"""
Phase and PhaseResult models — the provisioning contract.

A phase is one step of the provisioning run. It receives the shared
ProvisionContext and returns a PhaseResult. Phases never raise for an
expected failure: a failed command is captured in the result and the
executor decides, from the phase's error policy, whether the run stops.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Callable, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from swarmprep.core.services.provision.orchestration.context import ProvisionContext

# abort:  stop the run, exit 1
# warn:   print a warning line, continue
# ignore: log at debug level, continue
ErrorPolicy = Literal["abort", "warn", "ignore"]


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class PhaseResult(BaseModel):
    """Outcome of a single phase."""

    phase_id: str = ""
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    message: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(cls, message: str = "", **kwargs: Any) -> PhaseResult:
        """Create a success result."""
        return cls(status="ok", message=message, **kwargs)

    @classmethod
    def failure(cls, error: str, **kwargs: Any) -> PhaseResult:
        """Create a failure result."""
        return cls(status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, reason: str = "", **kwargs: Any) -> PhaseResult:
        """Create a skip result."""
        return cls(status="skipped", message=reason, **kwargs)


@dataclass(frozen=True)
class PhaseSpec:
    """A named phase plus the policy applied when it fails."""

    phase_id: str
    title: str
    run: Callable[[ProvisionContext], PhaseResult]
    on_error: ErrorPolicy = "abort"

    @property
    def gated(self) -> bool:
        """Whether a failure of this phase terminates the run."""
        return self.on_error == "abort"
