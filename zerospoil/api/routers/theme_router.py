import logging
from fastapi import APIRouter, Request
from typing import Dict, Any, Optional

from zerospoil.models.schemas import ThemeUpdate
from zerospoil.ui.theme import SessionThemeProvider, ThemeSelect, ThemeToggle
from zerospoil.utils.error_handler import ValidationError, handle_error

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix="/theme")

def _theme_state(provider: SessionThemeProvider) -> Dict[str, Any]:
    return {
        **ThemeToggle(provider).describe(),
        "options": ThemeSelect(provider).options(),
    }

@router.get("")
@handle_error
async def get_theme(request: Request, prefers_dark: Optional[bool] = None) -> Dict[str, Any]:
    """
    Current theme for this session.

    Args:
        prefers_dark: The client's color scheme preference, used to resolve "system"
    """
    provider = SessionThemeProvider(request.session)
    if prefers_dark is not None:
        provider.set_prefers_dark(prefers_dark)
    return _theme_state(provider)

@router.post("/toggle")
@handle_error
async def toggle_theme(request: Request) -> Dict[str, Any]:
    """Advance light -> dark -> system -> light."""
    provider = SessionThemeProvider(request.session)
    theme = ThemeToggle(provider).toggle()
    logger.info(f"Theme toggled to {theme.value}")
    return _theme_state(provider)

@router.put("")
@handle_error
async def select_theme(update: ThemeUpdate, request: Request) -> Dict[str, Any]:
    provider = SessionThemeProvider(request.session)
    try:
        ThemeSelect(provider).select(update.theme)
    except ValueError:
        raise ValidationError(f"Unknown theme: {update.theme}")
    return _theme_state(provider)
