import html
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from typing import Dict, Any, Optional

from zerospoil.api.dependencies import get_optional_user
from zerospoil.config.settings import get_settings
from zerospoil.ui.gate import AuthState, GateOutcome, GateVariant, dashboard_variant, evaluate_gate, home_variant
from zerospoil.ui.theme import SessionThemeProvider, ThemeToggle

logger = logging.getLogger(__name__)

# Create router
router = APIRouter()

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="en" data-theme="{theme}">
<head><meta charset="utf-8"><title>{title} - ZeroSpoil</title></head>
<body>
<header><button data-action="toggle-theme" title="{toggle_title}">{toggle_label}</button></header>
<main>{body}</main>
</body>
</html>"""

def _page(request: Request, title: str, body: str) -> HTMLResponse:
    toggle = ThemeToggle(SessionThemeProvider(request.session))
    return HTMLResponse(PAGE_TEMPLATE.format(
        theme=toggle.provider.resolved_theme().value,
        title=html.escape(title),
        toggle_title=html.escape(toggle.title),
        toggle_label=html.escape(toggle.label),
        body=body,
    ))

def _gated(variant: GateVariant, user: Optional[Dict[str, Any]]) -> Optional[RedirectResponse]:
    # Server-side the auth state is already resolved, so the loading branch never applies
    decision = evaluate_gate(variant, AuthState(user=user, loading=False))
    if decision.outcome is GateOutcome.REDIRECT:
        logger.info(f"Redirecting to {decision.redirect_to}")
        return RedirectResponse(decision.redirect_to, status_code=302)
    return None

@router.get("/", response_class=HTMLResponse)
async def home(request: Request, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    """Public landing page; signed-in users go straight to the dashboard."""
    redirect = _gated(home_variant(get_settings().dashboard_path), user)
    if redirect:
        return redirect
    return _page(request, "Smart Food Waste Management",
                 "<h1>ZeroSpoil</h1><p>Track your pantry, waste less food.</p>"
                 f'<a href="{html.escape(get_settings().login_path)}">Get started</a>')

@router.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, user: Optional[Dict[str, Any]] = Depends(get_optional_user)):
    redirect = _gated(dashboard_variant(get_settings().login_path), user)
    if redirect:
        return redirect
    name = (user.get("user_metadata") or {}).get("full_name") or user.get("email") or ""
    return _page(request, "Dashboard", f"<h1>Welcome back, {html.escape(name)}</h1>")

@router.get("/login", response_class=HTMLResponse)
async def login(request: Request):
    return _page(request, "Sign in",
                 '<h1>Sign in</h1><form data-endpoint="/api/auth/signin">'
                 '<input name="email" type="email"><input name="password" type="password">'
                 '<button type="submit">Sign in</button></form>')
