"""
L0 Data — CUDA / driver compatibility matrix.

Minimum NVIDIA driver (Linux) for each CUDA toolkit line a PyTorch
wheel may be built against.
Source: https://docs.nvidia.com/cuda/cuda-toolkit-release-notes/
"""

from __future__ import annotations

CUDA_DRIVER_COMPAT: list[tuple[str, str]] = [
    # (cuda_version, min_driver_version)
    ("12.4", "550.54"),
    ("12.1", "530.30"),
    ("12.0", "525.60"),
    ("11.8", "520.61"),
    ("11.7", "515.43"),
]
