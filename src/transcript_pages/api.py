"""Client for the remote sessions API used by the ``web`` command."""

import json
import os
import platform
import subprocess
from pathlib import Path

import httpx

API_BASE_URL = "https://api.anthropic.com/v1"
ANTHROPIC_VERSION = "2023-06-01"

KEYCHAIN_SERVICE = "Claude Code-credentials"


class CredentialsError(Exception):
    """Raised when credentials cannot be obtained."""


def get_access_token_from_keychain():
    """Read the OAuth access token from the macOS keychain.

    Returns None on other platforms or when no usable entry exists.
    """
    if platform.system() != "Darwin":
        return None

    try:
        result = subprocess.run(
            [
                "security",
                "find-generic-password",
                "-a",
                os.environ.get("USER", ""),
                "-s",
                KEYCHAIN_SERVICE,
                "-w",
            ],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            return None
        creds = json.loads(result.stdout.strip())
    except (json.JSONDecodeError, subprocess.SubprocessError, OSError):
        return None
    if not isinstance(creds, dict):
        return None
    return (creds.get("claudeAiOauth") or {}).get("accessToken")


def get_org_uuid_from_config(config_path=None):
    """Get the organization UUID from ``~/.claude.json``, or None."""
    if config_path is None:
        config_path = Path.home() / ".claude.json"
    config_path = Path(config_path)
    if not config_path.exists():
        return None

    try:
        config = json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return None
    if not isinstance(config, dict):
        return None
    return (config.get("oauthAccount") or {}).get("organizationUuid")


def resolve_credentials(token=None, org_uuid=None):
    """Fill in a missing token or org UUID from local configuration.

    Raises CredentialsError naming the option to pass when one cannot be found.
    """
    if token is None:
        token = get_access_token_from_keychain()
        if token is None:
            if platform.system() == "Darwin":
                raise CredentialsError(
                    "Could not retrieve access token from macOS keychain. "
                    "Make sure you are logged into Claude Code, or provide --token."
                )
            raise CredentialsError(
                "On non-macOS platforms, you must provide --token with your access token."
            )

    if org_uuid is None:
        org_uuid = get_org_uuid_from_config()
        if org_uuid is None:
            raise CredentialsError(
                "Could not find organization UUID in ~/.claude.json. "
                "Provide --org-uuid with your organization UUID."
            )

    return token, org_uuid


def get_api_headers(token, org_uuid):
    """Build API request headers."""
    return {
        "Authorization": f"Bearer {token}",
        "anthropic-version": ANTHROPIC_VERSION,
        "Content-Type": "application/json",
        "x-organization-uuid": org_uuid,
    }


def fetch_sessions(token, org_uuid):
    """Fetch the list of sessions.

    Raises httpx.HTTPError on network/API errors.
    """
    response = httpx.get(
        f"{API_BASE_URL}/sessions",
        headers=get_api_headers(token, org_uuid),
        timeout=30.0,
    )
    response.raise_for_status()
    return response.json()


def fetch_session(token, org_uuid, session_id):
    """Fetch one session document, ready for ``parse_session_data``.

    Raises httpx.HTTPError on network/API errors.
    """
    response = httpx.get(
        f"{API_BASE_URL}/session_ingress/session/{session_id}",
        headers=get_api_headers(token, org_uuid),
        timeout=60.0,
    )
    response.raise_for_status()
    return response.json()
