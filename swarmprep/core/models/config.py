"""
Provisioning configuration — the constants that drive a run.

Every default here reproduces the fixed behavior of a bare
``swarmprep`` invocation. A ``swarmprep.yml`` file may override any
field; nothing is required.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class NodeConfig(BaseModel):
    """Node.js toolchain installed system-wide from NodeSource."""

    listing_url: str = "https://nodejs.org/dist/latest/"
    version_pattern: str = r"node-v(\d+\.\d+\.\d+)"
    version_strategy: Literal["first", "highest"] = "first"
    nodesource_setup_url: str = "https://deb.nodesource.com/setup_{major}.x"
    package: str = "nodejs"
    download_tool: str = "curl"
    binaries: list[str] = Field(default_factory=lambda: ["node", "npm"])
    fetch_timeout: int = 30


class PythonEnvConfig(BaseModel):
    """Isolated Python environment and the packages that go into it."""

    venv_dir: str = ".venv"
    base_python: str = "python3"
    conflicting_packages: list[str] = Field(
        default_factory=lambda: ["torch", "torchvision", "torchaudio"]
    )
    pinned_packages: list[str] = Field(
        default_factory=lambda: [
            "torch==2.2.2+cu121",
            "torchvision==0.17.2+cu121",
            "torchaudio==2.2.2+cu121",
        ]
    )
    extra_index_url: str = "https://download.pytorch.org/whl/cu121"
    cuda_version: str = "12.1"
    repin_packages: list[str] = Field(default_factory=lambda: ["numpy==1.26.4"])
    auxiliary_packages: list[str] = Field(
        default_factory=lambda: ["hivemind", "transformers", "trl"]
    )


class ProvisionConfig(BaseModel):
    """Root configuration — loaded from swarmprep.yml or built from defaults."""

    version: int = 1

    node: NodeConfig = Field(default_factory=NodeConfig)
    python: PythonEnvConfig = Field(default_factory=PythonEnvConfig)

    command_timeout: int | None = None   # None = wait for the child forever
    audit: bool = True
