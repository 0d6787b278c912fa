"""
L5 Orchestration — the provisioning context and the ordered phase list.

Import from the submodules directly (``context``, ``phases``); the
execution layer depends on ``context``.
"""
