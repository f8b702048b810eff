# backend/api/services/route_gate.py
from __future__ import annotations

import os
from typing import Mapping, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import RedirectResponse

SESSION_COOKIE = os.getenv("SESSION_COOKIE", "sb-access-token")
ADMIN_PATH = os.getenv("ADMIN_PATH", "/admin")
FORM_PATH = os.getenv("FORM_PATH", "/agent")


def gate_redirect(
    path: str,
    cookies: Mapping[str, str],
    *,
    admin_path: str = ADMIN_PATH,
    form_path: str = FORM_PATH,
    cookie_name: str = SESSION_COOKIE,
) -> Optional[str]:
    """Where to send the request instead, or None to let it through."""
    if path.startswith(admin_path) and not cookies.get(cookie_name):
        return form_path
    return None


class RouteGateMiddleware(BaseHTTPMiddleware):
    """
    Bounce admin pages to the submission form when the session cookie is
    missing. The cookie is only checked for presence; the store enforces access.
    """

    def __init__(self, app, *, admin_path: str = ADMIN_PATH, form_path: str = FORM_PATH,
                 cookie_name: str = SESSION_COOKIE):
        super().__init__(app)
        self.admin_path = admin_path
        self.form_path = form_path
        self.cookie_name = cookie_name

    async def dispatch(self, request: Request, call_next):
        target = gate_redirect(
            request.url.path,
            request.cookies,
            admin_path=self.admin_path,
            form_path=self.form_path,
            cookie_name=self.cookie_name,
        )
        if target:
            return RedirectResponse(url=target)
        return await call_next(request)
