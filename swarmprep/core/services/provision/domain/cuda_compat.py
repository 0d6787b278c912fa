"""
L1 Domain — CUDA / driver compatibility check (pure).
"""

from __future__ import annotations

from swarmprep.core.services.provision.data.cuda_matrix import CUDA_DRIVER_COMPAT


def check_cuda_driver_compat(
    cuda_version: str,
    driver_version: str,
) -> dict:
    """Check if a driver version can run a CUDA toolkit version.

    Args:
        cuda_version: Target CUDA version, e.g. ``"12.1"``.
        driver_version: Installed NVIDIA driver version, e.g. ``"535.183"``.

    Returns:
        ``{"compatible": True}`` or
        ``{"compatible": False, "min_driver": "...", "message": "..."}``
    """
    parts = cuda_version.split(".")
    cuda_mm = f"{parts[0]}.{parts[1]}" if len(parts) >= 2 else cuda_version

    min_driver = dict(CUDA_DRIVER_COMPAT).get(cuda_mm)
    if min_driver is None:
        return {"compatible": True, "unknown_cuda": cuda_mm}

    try:
        drv = tuple(int(x) for x in driver_version.split(".")[:2])
        need = tuple(int(x) for x in min_driver.split(".")[:2])
    except ValueError:
        return {"compatible": True, "parse_error": True}

    if drv >= need:
        return {"compatible": True}
    return {
        "compatible": False,
        "min_driver": min_driver,
        "message": (
            f"CUDA {cuda_mm} requires driver >= {min_driver}, "
            f"but installed driver is {driver_version}."
        ),
    }
