"""Policy orchestration: shared state, engine and wiring."""

from navguard.orchestrator.engine import PolicyEngine
from navguard.orchestrator.state import PolicyState

__all__ = ["PolicyEngine", "PolicyState"]
