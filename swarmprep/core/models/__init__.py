"""
Domain models — Pydantic types for provisioning.

    from swarmprep.core.models import ProvisionConfig, PhaseResult, PhaseSpec
"""

from swarmprep.core.models.config import NodeConfig, ProvisionConfig, PythonEnvConfig
from swarmprep.core.models.phase import ErrorPolicy, PhaseResult, PhaseSpec

__all__ = [
    # config.py
    "NodeConfig",
    "ProvisionConfig",
    "PythonEnvConfig",
    # phase.py
    "ErrorPolicy",
    "PhaseResult",
    "PhaseSpec",
]
