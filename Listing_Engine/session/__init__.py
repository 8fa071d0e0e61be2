"""
Session — one user's editing session and the controller that drives it.

    SessionContext            — all mutable session state, no globals
    ReconciliationController  — user actions + automatic reconciliation passes
"""
from .state import SessionContext, SessionState
from .controller import SECTION_SHORTCUTS, ReconciliationController

__all__ = ["SessionContext", "SessionState", "ReconciliationController", "SECTION_SHORTCUTS"]
