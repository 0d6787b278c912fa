"""
swarmprep — host provisioning for rl-swarm style nodes.

Installs Node.js + npm from NodeSource, then builds a Python virtual
environment with a pinned CUDA PyTorch stack.
"""

__version__ = "0.1.0"
