"""
L0 Data — shared constants for provisioning.
"""

from __future__ import annotations

# Sent with every HTTP request made by swarmprep itself.
USER_AGENT = "swarmprep/1.0"

# Captured command output is trimmed to its tail before it is stored.
OUTPUT_TAIL_CHARS = 2000

# Query run inside the venv interpreter by the capability check.
CUDA_PROBE_CODE = "import torch; print(torch.cuda.is_available())"
