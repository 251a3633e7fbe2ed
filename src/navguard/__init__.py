"""Navigation and download security policy engine."""

from navguard.orchestrator.build import create_engine
from navguard.orchestrator.engine import PolicyEngine

__all__ = ["PolicyEngine", "create_engine"]

__version__ = "0.3.0"
