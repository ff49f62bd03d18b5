"""
Google Calendar API client — OAuth and service management.

Handles:
- OAuth application secret loading
- Installed-app OAuth flow, token storage and refresh
- Calendar service instance creation with a request timeout
- Request execution with retry and error mapping
"""

import json
import logging
import os
import socket
import time
from typing import Optional

import httplib2
from google.auth.exceptions import RefreshError, TransportError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_httplib2 import AuthorizedHttp
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource
from googleapiclient.errors import HttpError

from calendar_rsvp.errors import AuthError, RemoteApiError, RemoteTimeoutError
from calendar_rsvp.settings import Settings


logger = logging.getLogger(__name__)


# ============================================================================
# Credential Management
# ============================================================================

def load_client_secret(settings: Settings) -> dict:
    """
    Load the OAuth application secret file.

    Returns the full client config ({"installed": {...}}) for InstalledAppFlow.
    Raises AuthError if the file is missing, unreadable, or not an
    installed-app secret.
    """
    secret_path = settings.get_oauth_secret_path()

    if not secret_path.exists():
        raise AuthError(
            "Missing OAuth2 secret file. Create an application on the Google "
            "Developer Console (https://console.developers.google.com/) and "
            f"download the JSON secret file to '{secret_path}'."
        )

    try:
        secret = json.loads(secret_path.read_text(encoding="utf-8"))
    except OSError as e:
        raise AuthError("unable to open OAuth secret file") from e
    except json.JSONDecodeError as e:
        raise AuthError("unable to parse OAuth application secret file") from e

    if not isinstance(secret, dict) or "installed" not in secret:
        raise AuthError("OAuth2 application secret not found")

    return secret


def save_credentials(settings: Settings, creds: Credentials) -> None:
    """Save credentials to token file with secure permissions."""
    settings.ensure_dirs()
    token_path = settings.get_token_path()
    token_path.write_text(creds.to_json(), encoding="utf-8")
    os.chmod(token_path, 0o600)


def load_cached_credentials(settings: Settings) -> Optional[Credentials]:
    """
    Load credentials from the token cache, refreshing if expired.

    Returns None when there is no usable token and the OAuth flow must run.
    """
    token_path = settings.get_token_path()

    if not token_path.exists():
        logger.debug(f"No token file found at '{token_path}'")
        return None

    try:
        creds = Credentials.from_authorized_user_file(str(token_path), settings.scopes)
    except (json.JSONDecodeError, ValueError) as e:
        logger.warning(f"Failed to load cached token: {e}")
        return None

    if creds.valid:
        return creds

    if not (creds.expired and creds.refresh_token):
        logger.warning("Cached token cannot be refreshed - reauth required")
        return None

    logger.info("Token expired, attempting refresh...")
    try:
        creds.refresh(Request())
    except RefreshError as e:
        logger.warning(f"Token refresh failed, reauth required: {e}")
        return None
    except TransportError as e:
        raise AuthError("unable to refresh OAuth token") from e

    save_credentials(settings, creds)
    logger.info("Token refreshed successfully")
    return creds


def run_oauth_flow(settings: Settings) -> Credentials:
    """
    Run the installed-app OAuth flow.

    Opens the browser for user authorization and stores the token.
    """
    secret = load_client_secret(settings)

    flow = InstalledAppFlow.from_client_config(secret, settings.scopes)

    try:
        creds = flow.run_local_server(
            port=0,
            authorization_prompt_message="Authorize Google Calendar RSVP in browser: {url}",
            success_message="Authorization complete. You can close this window.",
        )
    except Exception as e:
        raise AuthError("authentication failed") from e

    save_credentials(settings, creds)

    return creds


def get_credentials(settings: Settings) -> Credentials:
    """
    Get valid credentials.

    Uses the token cache when possible, otherwise runs the OAuth flow.

    Raises:
        AuthError: Secret file problems or authorization failure.
    """
    creds = load_cached_credentials(settings)

    if creds is None:
        creds = run_oauth_flow(settings)

    return creds


def get_service(settings: Settings, creds: Optional[Credentials] = None) -> Resource:
    """
    Get Calendar API service.

    Every request made through the service times out after
    settings.http_timeout seconds.
    """
    if creds is None:
        creds = get_credentials(settings)

    http = AuthorizedHttp(creds, http=httplib2.Http(timeout=settings.http_timeout))

    return build("calendar", "v3", http=http, cache_discovery=False)


# ============================================================================
# API Request Helper with Retry and Error Mapping
# ============================================================================

def execute_with_retry(request, action: str, max_retries: int = 3):
    """
    Execute Google API request with retry and error handling.

    Handles:
    - 401/403 → AuthError
    - 429 rate limit → retry with exponential backoff
    - 5xx server errors → retry
    - Timeouts → retry, then RemoteTimeoutError
    - Token refresh failure → AuthError
    - Network errors → retry, then RemoteApiError

    Args:
        request: Google API request object (before .execute())
        action: Description used as the error message, e.g. "unable to get event 'x'"
        max_retries: Maximum attempts (default: 3)

    Returns:
        API response dict
    """
    max_retries = max(1, max_retries)

    for attempt in range(max_retries):
        last_attempt = attempt == max_retries - 1

        try:
            return request.execute()

        except HttpError as e:
            status = e.resp.status
            logger.warning(
                f"Calendar API error {status} (attempt {attempt + 1}/{max_retries}): {e.reason}"
            )

            # Auth errors - no retry
            if status in (401, 403):
                raise AuthError(action) from e

            if (status == 429 or status >= 500) and not last_attempt:
                wait = 2 ** (attempt + 1) if status == 429 else 2 ** attempt
                logger.info(f"Retrying in {wait}s...")
                time.sleep(wait)
                continue

            raise RemoteApiError(action, status=status) from e

        except RefreshError as e:
            logger.error(f"Token refresh failed during request: {e}")
            raise AuthError(action) from e

        except (socket.timeout, TimeoutError) as e:
            if not last_attempt:
                wait = 2 ** attempt
                logger.warning(f"Request timed out, retrying in {wait}s...")
                time.sleep(wait)
                continue
            raise RemoteTimeoutError(action) from e

        except (OSError, httplib2.HttpLib2Error, TransportError) as e:
            if not last_attempt:
                wait = 2 ** attempt
                logger.warning(f"Request failed: {e}, retrying in {wait}s...")
                time.sleep(wait)
                continue
            raise RemoteApiError(action) from e

    raise RemoteApiError(action)
