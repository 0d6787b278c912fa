"""
L1 Domain — ``__init__.py`` re-exports all pure domain functions.

No subprocess calls, no filesystem access, no network calls.
"""

from swarmprep.core.services.provision.domain.cuda_compat import (  # noqa: F401
    check_cuda_driver_compat,
)
from swarmprep.core.services.provision.domain.node_version import (  # noqa: F401
    DEFAULT_VERSION_PATTERN,
    VersionDiscoveryError,
    first_listed_version,
    highest_listed_version,
    major_version,
    parse_listing_versions,
    select_version,
)
