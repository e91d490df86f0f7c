"""
Accounts app utility functions

Helpers for the per-session AI credential. The key is kept in the user's
session only and never written to the database. Also validates post-action
redirect targets.
"""
import logging
import os

from django.conf import settings
from django.utils.http import url_has_allowed_host_and_scheme

logger = logging.getLogger(__name__)

SESSION_API_KEY = 'analysis_api_key'


def get_api_key(request) -> str:
    """
    Return the credential for AI requests made on behalf of this session.

    Falls back to the server-wide GROQ_API_KEY when the user has not
    supplied their own key.
    """
    session_key = (request.session.get(SESSION_API_KEY) or '').strip()
    if session_key:
        return session_key
    return os.environ.get('GROQ_API_KEY') or getattr(settings, 'GROQ_API_KEY', '')


def set_api_key(request, api_key: str) -> None:
    """
    Store a user-supplied credential in the session.

    Raises:
        ValueError: If the key is empty
    """
    api_key = (api_key or '').strip()
    if not api_key:
        raise ValueError("API key must not be empty.")
    request.session[SESSION_API_KEY] = api_key
    logger.info("Stored replacement API key for user %s", getattr(request.user, 'pk', None))


def clear_api_key(request) -> None:
    """Forget the session credential, reverting to the server default."""
    request.session.pop(SESSION_API_KEY, None)


def has_session_api_key(request) -> bool:
    return bool((request.session.get(SESSION_API_KEY) or '').strip())


def safe_next_url(request, default: str = 'dashboard') -> str:
    """
    The ``next`` value posted with a form, or ``default`` when it is missing
    or points away from this site.
    """
    next_url = request.POST.get('next') or ''
    if next_url and url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return next_url
    if next_url:
        logger.warning("Ignoring unsafe redirect target %r", next_url)
    return default
