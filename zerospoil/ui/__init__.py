"""
Framework-independent UI state: auth gates and theme controls.
"""

from .gate import AuthState, AuthGate, DashboardWrapper, HomeClient, GateOutcome, evaluate_gate
from .theme import Theme, ThemeToggle, ThemeSelect, SessionThemeProvider, next_theme

__all__ = [
    'AuthState', 'AuthGate', 'DashboardWrapper', 'HomeClient', 'GateOutcome', 'evaluate_gate',
    'Theme', 'ThemeToggle', 'ThemeSelect', 'SessionThemeProvider', 'next_theme'
]
