"""
Provisioning service — package re-exports.

Layers, bottom to top: data → domain → detection → execution →
orchestration.

    from swarmprep.core.services.provision import build_phases, ProvisionContext
"""

# ── L0: Data ──
from swarmprep.core.services.provision.data.constants import CUDA_PROBE_CODE  # noqa: F401

# ── L1: Domain ──
from swarmprep.core.services.provision.domain.node_version import (  # noqa: F401
    VersionDiscoveryError,
    first_listed_version,
    highest_listed_version,
    major_version,
    select_version,
)

# ── L3: Detection ──
from swarmprep.core.services.provision.detection.listing import (  # noqa: F401
    discover_latest_version,
)

# ── L4: Execution ──
from swarmprep.core.services.provision.execution.subprocess_runner import (  # noqa: F401
    run_command,
)

# ── L5: Orchestration ──
from swarmprep.core.services.provision.orchestration.context import (  # noqa: F401
    ProvisionContext,
)
from swarmprep.core.services.provision.orchestration.phases import (  # noqa: F401
    build_phases,
)
