"""Credential handling for remote repository URLs."""
from __future__ import annotations

import base64
import re
from typing import Dict, List, Optional, Sequence
from urllib.parse import SplitResult, urlsplit, urlunsplit

_USERINFO_RE = re.compile(r"([a-zA-Z][a-zA-Z0-9+.-]*://)[^/@\s]+@")


def _authority(parts: SplitResult) -> str:
    """Host and explicit port of a URL, without any userinfo."""
    if parts.port:
        return f"{parts.hostname}:{parts.port}"
    return parts.hostname or ""


def build_authenticated_url(url: str, token: Optional[str] = None) -> str:
    """Embed an access token in the authority part of a remote URL.

    The format is ``scheme://token@host/path``, which is what GitHub accepts
    for token authenticated clones over HTTPS.

    Args:
        url: Remote repository URL
        token: Optional access token

    Returns:
        The URL to hand to git. Unchanged when no token is given or the URL
        has no scheme (e.g. scp-style ssh remotes).
    """
    if not token:
        return url

    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return url

    netloc = _authority(parts)

    return urlunsplit((parts.scheme, f"{token}@{netloc}", parts.path, parts.query, parts.fragment))


def credential_env(url: str, token: Optional[str] = None) -> Dict[str, str]:
    """Environment variables that make git authenticate to the remote's host.

    The token is sent as an ``http.<scheme>://<host>/.extraHeader`` set
    through git's ``GIT_CONFIG_*`` variables (git 2.31+), so it never
    appears on a command line or in the checkout's ``.git/config``.

    Args:
        url: Remote repository URL
        token: Optional access token

    Returns:
        Variables to add to git's environment. Empty when no token is given
        or the URL has no scheme.
    """
    if not token:
        return {}

    parts = urlsplit(url)
    if not parts.scheme or not parts.hostname:
        return {}

    netloc = _authority(parts)

    credentials = base64.b64encode(f"x-access-token:{token}".encode()).decode()
    return {
        "GIT_CONFIG_COUNT": "1",
        "GIT_CONFIG_KEY_0": f"http.{parts.scheme}://{netloc}/.extraHeader",
        "GIT_CONFIG_VALUE_0": f"Authorization: Basic {credentials}",
    }


def redact_url(value: str) -> str:
    """Strip any userinfo (tokens, passwords) from a URL-like string."""
    parts = urlsplit(value)
    if not parts.scheme or "@" not in parts.netloc:
        return value

    host = parts.netloc.rsplit("@", 1)[1]
    return urlunsplit((parts.scheme, f"***@{host}", parts.path, parts.query, parts.fragment))


def redact_args(args: Sequence[str]) -> List[str]:
    """Redact credentials from every argument of a command line."""
    return [redact_url(arg) for arg in args]


def redact_text(text: str) -> str:
    """Redact URL credentials embedded anywhere in free text (e.g. tool stderr)."""
    return _USERINFO_RE.sub(r"\1***@", text)
