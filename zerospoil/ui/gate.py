"""
Auth-gated layout wrappers.

A gate looks at the current auth state and decides whether to show a
loading indicator, nothing (while a redirect is under way) or the wrapped
content. The dashboard gate sends signed-out visitors to the login page; the
home gate sends signed-in users on to the dashboard.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass(frozen=True)
class AuthState:
    """What the auth provider currently knows about the visitor."""
    user: Optional[Dict[str, Any]] = None
    loading: bool = False


class GateOutcome(str, Enum):
    LOADING = "loading"
    REDIRECT = "redirect"
    RENDER = "render"


@dataclass(frozen=True)
class GateDecision:
    outcome: GateOutcome
    redirect_to: Optional[str] = None
    loading_text: Optional[str] = None


@dataclass(frozen=True)
class GateVariant:
    """
    Gate configuration.

    `requires_user` is True for pages only signed-in users may see and False
    for pages only signed-out visitors may see.
    """
    requires_user: bool
    redirect_to: str
    loading_text: str


def dashboard_variant(login_path: str = "/login") -> GateVariant:
    return GateVariant(requires_user=True, redirect_to=login_path, loading_text="Loading dashboard...")


def home_variant(dashboard_path: str = "/dashboard") -> GateVariant:
    return GateVariant(requires_user=False, redirect_to=dashboard_path, loading_text="Loading...")


def evaluate_gate(variant: GateVariant, state: AuthState) -> GateDecision:
    """Decide what a gate shows for an auth state."""
    if state.loading:
        return GateDecision(GateOutcome.LOADING, loading_text=variant.loading_text)
    has_user = state.user is not None
    if has_user != variant.requires_user:
        return GateDecision(GateOutcome.REDIRECT, redirect_to=variant.redirect_to)
    return GateDecision(GateOutcome.RENDER)


@dataclass(frozen=True)
class LoadingIndicator:
    text: str
    size: str = "lg"


class AuthGate(Generic[T]):
    """
    Stateful gate for a long-lived view.

    `render` is called each time the auth state may have changed. The
    navigation callback runs once per distinct `(user, loading)` state, so
    re-rendering an unchanged signed-out state does not navigate again.
    """

    def __init__(self, variant: GateVariant, navigate: Callable[[str], None]):
        self.variant = variant
        self.navigate = navigate
        self._last_state: Optional[AuthState] = None

    def render(self, state: AuthState, children: T) -> Optional[Any]:
        decision = evaluate_gate(self.variant, state)
        if state != self._last_state:
            self._last_state = state
            if decision.outcome is GateOutcome.REDIRECT:
                logger.info(f"Auth gate redirecting to {decision.redirect_to}")
                self.navigate(decision.redirect_to)

        if decision.outcome is GateOutcome.LOADING:
            return LoadingIndicator(decision.loading_text)
        if decision.outcome is GateOutcome.REDIRECT:
            return None
        return children


class DashboardWrapper(AuthGate[T]):
    """Shows its content only to signed-in users."""

    def __init__(self, navigate: Callable[[str], None], login_path: str = "/login"):
        super().__init__(dashboard_variant(login_path), navigate)


class HomeClient(AuthGate[T]):
    """Shows the public landing content only to signed-out visitors."""

    def __init__(self, navigate: Callable[[str], None], dashboard_path: str = "/dashboard"):
        super().__init__(home_variant(dashboard_path), navigate)
