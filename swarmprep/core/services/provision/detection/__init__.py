"""
L3 Detection — ``__init__.py`` re-exports all detection functions.

These functions READ system state but never WRITE.
"""

from swarmprep.core.services.provision.detection.hardware import (  # noqa: F401
    nvidia_smi,
    parse_cuda_probe,
)
from swarmprep.core.services.provision.detection.listing import (  # noqa: F401
    discover_latest_version,
    fetch_text,
)
from swarmprep.core.services.provision.detection.runtime import (  # noqa: F401
    VERSION_COMMANDS,
    get_tool_version,
)
