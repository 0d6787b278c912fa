"""
L0 Data — ``__init__.py`` re-exports all data constants.
"""

from swarmprep.core.services.provision.data.constants import (  # noqa: F401
    CUDA_PROBE_CODE,
    OUTPUT_TAIL_CHARS,
    USER_AGENT,
)
from swarmprep.core.services.provision.data.cuda_matrix import (  # noqa: F401
    CUDA_DRIVER_COMPAT,
)
