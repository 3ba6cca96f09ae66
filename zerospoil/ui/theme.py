"""
Theme toggle and theme select controls.

The controls never store the theme themselves: reads and writes go through
a ThemeProvider, which owns persistence.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, MutableMapping, Optional, Protocol

logger = logging.getLogger(__name__)


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


THEME_CYCLE = (Theme.LIGHT, Theme.DARK, Theme.SYSTEM)

THEME_LABELS = {Theme.LIGHT: "Light", Theme.DARK: "Dark", Theme.SYSTEM: "System"}
SELECT_LABELS = {Theme.LIGHT: "Light", Theme.DARK: "Dark", Theme.SYSTEM: "Auto"}
SELECT_ICONS = {Theme.LIGHT: "sun", Theme.DARK: "moon", Theme.SYSTEM: "monitor"}


def parse_theme(value: Any) -> Theme:
    """Return the Theme for a stored value; raises ValueError on unknown values."""
    return Theme(value)


def next_theme(theme: Theme) -> Theme:
    """light -> dark -> system -> light"""
    index = THEME_CYCLE.index(Theme(theme))
    return THEME_CYCLE[(index + 1) % len(THEME_CYCLE)]


class ThemeProvider(Protocol):
    def get_theme(self) -> Theme: ...

    def set_theme(self, theme: Theme) -> None: ...

    def resolved_theme(self) -> Theme: ...


class SessionThemeProvider:
    """
    Theme provider backed by a session mapping.

    `system` resolves to the preference the client last reported (see
    `prefers_dark`), falling back to light.
    """

    SESSION_KEY = "theme"
    PREFERS_DARK_KEY = "prefers_dark"

    def __init__(self, session: MutableMapping[str, Any], default: Theme = Theme.LIGHT):
        self.session = session
        self.default = default

    def get_theme(self) -> Theme:
        stored = self.session.get(self.SESSION_KEY)
        try:
            return parse_theme(stored) if stored else self.default
        except ValueError:
            logger.warning(f"Ignoring unknown theme in session: {stored!r}")
            return self.default

    def set_theme(self, theme: Theme) -> None:
        self.session[self.SESSION_KEY] = Theme(theme).value

    def set_prefers_dark(self, prefers_dark: bool) -> None:
        self.session[self.PREFERS_DARK_KEY] = bool(prefers_dark)

    def resolved_theme(self) -> Theme:
        theme = self.get_theme()
        if theme is Theme.SYSTEM:
            return Theme.DARK if self.session.get(self.PREFERS_DARK_KEY) else Theme.LIGHT
        return theme


class ThemeToggle:
    """Single button that cycles through the themes."""

    def __init__(self, provider: ThemeProvider):
        self.provider = provider

    def toggle(self) -> Theme:
        theme = next_theme(self.provider.get_theme())
        self.provider.set_theme(theme)
        return theme

    @property
    def label(self) -> str:
        return THEME_LABELS[self.provider.get_theme()]

    @property
    def icon(self) -> str:
        if self.provider.get_theme() is Theme.SYSTEM:
            return "monitor"
        return "moon" if self.provider.resolved_theme() is Theme.DARK else "sun"

    @property
    def title(self) -> str:
        return f"Switch to {next_theme(self.provider.get_theme()).value} mode"

    def describe(self) -> Dict[str, Any]:
        return {
            "theme": self.provider.get_theme().value,
            "resolved_theme": self.provider.resolved_theme().value,
            "label": self.label,
            "icon": self.icon,
            "title": self.title,
        }


class ThemeSelect:
    """One button per theme; picking one jumps straight to it."""

    def __init__(self, provider: ThemeProvider):
        self.provider = provider

    def select(self, theme: Theme) -> Theme:
        theme = parse_theme(theme)
        self.provider.set_theme(theme)
        return theme

    def options(self, current: Optional[Theme] = None) -> List[Dict[str, Any]]:
        current = current or self.provider.get_theme()
        return [
            {
                "value": theme.value,
                "label": SELECT_LABELS[theme],
                "icon": SELECT_ICONS[theme],
                "active": theme is current,
            }
            for theme in THEME_CYCLE
        ]
