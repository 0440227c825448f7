"""Agent Studio - project scaffolding agent resolution.

Selects the agents a project needs, resolves their dependencies and
conflicts, and emits an ordered, conflict-free configuration bundle.
"""

__version__ = "0.1.0"
