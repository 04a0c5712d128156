import logging
from urllib.parse import urljoin

import requests
from flask import current_app, request
from flask_login import UserMixin

logger = logging.getLogger(__name__)

ROLES = ("faculty", "hod", "admin")


class SessionUser(UserMixin):
    """User as reported by the external session service."""

    def __init__(self, username, role, name=None, email=None, department_id=None):
        self.username = str(username)
        self.role = (role or "").lower()
        self.name = name
        self.email = email
        self.department_id = department_id

    def get_id(self):
        return self.username

    def __repr__(self):
        return f"<SessionUser {self.username} ({self.role})>"


def auth_me_url():
    url = current_app.config["AUTH_ME_URL"]
    if url.startswith(("http://", "https://")):
        return url
    return urljoin(request.host_url, url.lstrip("/"))


def fetch_session_user(cookie_header):
    """Ask the session service who owns this cookie.

    Returns None when there is no session, the service rejects it, or the
    call itself fails.
    """
    if not cookie_header:
        return None

    try:
        response = requests.get(
            auth_me_url(),
            headers={"cookie": cookie_header},
            timeout=current_app.config.get("AUTH_REQUEST_TIMEOUT", 10)
        )
    except requests.RequestException as exc:
        logger.warning("Auth service unreachable: %s", exc)
        return None

    if not response.ok:
        logger.info("Auth service rejected session (status %s)", response.status_code)
        return None

    try:
        payload = response.json()
    except ValueError:
        logger.warning("Auth service returned a non-JSON body")
        return None

    if not isinstance(payload, dict) or not payload.get("success"):
        return None

    user = payload.get("user")
    if not isinstance(user, dict) or not user.get("username"):
        return None

    return SessionUser(
        username=user["username"],
        role=user.get("role"),
        name=user.get("name"),
        email=user.get("email"),
        department_id=user.get("department_id")
    )
