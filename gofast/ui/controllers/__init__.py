"""Qt-aware controllers used by the editor shell."""

from .deferred_navigation_controller import DeferredNavigationController, NavigationState, PendingJump
from .symbol_navigation_controller import SymbolNavigationController

__all__ = [
    "DeferredNavigationController",
    "NavigationState",
    "PendingJump",
    "SymbolNavigationController",
]
