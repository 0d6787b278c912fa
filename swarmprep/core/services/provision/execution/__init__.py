"""
L4 Execution — commands that WRITE to the system.

Subprocess calls, apt/NodeSource setup, venv creation, pip installs.
"""

from swarmprep.core.services.provision.execution.subprocess_runner import (  # noqa: F401
    CommandRunner,
    run_command,
    sudo_prefix,
)
