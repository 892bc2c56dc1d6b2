"""HTTP client for the Kaggle API: credentials, authentication and requests."""

from __future__ import annotations

import json
import logging
import os
from http import HTTPStatus
from pathlib import Path
from typing import Any
from urllib.parse import quote

import requests

from .errors import (
    ApiError,
    AuthenticationError,
    JsonError,
    KaggleError,
    KaggleMcpError,
    NotAuthenticatedError,
    wrap_exception,
)
from .models import Competition, KaggleConfig, KaggleCredentials

log = logging.getLogger(__name__)

KAGGLE_API_BASE = "https://www.kaggle.com/api/v1"
USER_AGENT = "kaggle-mcp/0.1.0"


def credentials_path() -> Path:
    """Return the path of ``~/.kaggle/kaggle.json``."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise KaggleMcpError("Could not determine home directory") from exc
    return home / ".kaggle" / "kaggle.json"


def competitions_list_url(
    api_base: str = KAGGLE_API_BASE,
    search: str = "",
    category: str = "all",
    group: str = "general",
    sort_by: str = "latestDeadline",
    page: int = 1,
) -> str:
    """Build the competitions listing URL, leaving out parameters at their defaults."""
    query = []
    if search:
        query.append(f"search={quote(search, safe='')}")
    if category != "all":
        query.append(f"category={category}")
    if group != "general":
        query.append(f"group={group}")
    if sort_by != "latestDeadline":
        query.append(f"sortBy={sort_by}")
    if page > 1:
        query.append(f"page={page}")
    url = f"{api_base}/competitions/list"
    return f"{url}?{'&'.join(query)}" if query else url


def _status_text(code: int) -> str:
    try:
        return f"{code} {HTTPStatus(code).phrase}"
    except ValueError:
        return str(code)


def _is_success(response: requests.Response) -> bool:
    return 200 <= response.status_code < 300


class KaggleClient:
    """Holds Kaggle credentials and performs authenticated API requests.

    Credentials come from :meth:`authenticate`, or from the ``KAGGLE_USERNAME``
    and ``KAGGLE_KEY`` environment variables or ``~/.kaggle/kaggle.json``
    through :meth:`load_credentials`.
    """

    def __init__(
        self,
        api_base: str = KAGGLE_API_BASE,
        persist_credentials: bool = True,
        session: requests.Session | None = None,
    ) -> None:
        self.api_base = api_base.rstrip("/")
        self.persist_credentials = persist_credentials
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self.session = session
        self.credentials: KaggleCredentials | None = None
        self.config = KaggleConfig()

    def authenticate(self, username: str, key: str) -> None:
        """Check the credentials against the API, then keep and save them."""
        log.info("Authenticating with Kaggle API")
        log.debug("Username: %s", username)
        url = f"{self.api_base}/competitions/list"
        log.debug("Testing authentication with URL: %s", url)
        try:
            response = self.session.get(url, auth=(username, key))
        except requests.RequestException as exc:
            raise wrap_exception(exc) from exc

        if not _is_success(response):
            status = _status_text(response.status_code)
            log.error("Authentication failed with status: %s", status)
            raise AuthenticationError(f"Invalid credentials: {status}")

        log.info("Authentication successful")
        self.credentials = KaggleCredentials(username=username, key=key)
        if self.persist_credentials:
            self.save_credentials(username, key)

    def is_authenticated(self) -> bool:
        """Return whether credentials are held; they are not validated."""
        return self.credentials is not None

    def save_credentials(self, username: str, key: str) -> Path:
        """Write the credentials to ``~/.kaggle/kaggle.json`` readable by the owner only."""
        log.info("Saving credentials to kaggle.json")
        path = credentials_path()
        content = json.dumps({"username": username, "key": key}, indent=2)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            if os.name == "posix":
                path.chmod(0o600)
        except OSError as exc:
            raise wrap_exception(exc) from exc
        log.info("Credentials saved successfully")
        return path

    def load_credentials(self) -> None:
        """Load credentials from the environment, or else from kaggle.json."""
        log.info("Loading Kaggle credentials")
        username = os.environ.get("KAGGLE_USERNAME")
        key = os.environ.get("KAGGLE_KEY")
        if username is not None and key is not None:
            log.info("Found credentials in environment variables")
            self.credentials = KaggleCredentials(username=username, key=key)
            return

        try:
            path = credentials_path()
        except KaggleMcpError as exc:
            log.warning("Could not determine home directory")
            raise NotAuthenticatedError() from exc

        log.debug("Checking for kaggle.json at: %s", path)
        if not path.exists():
            log.warning("No credentials found in environment variables or kaggle.json")
            raise NotAuthenticatedError()

        log.info("Found kaggle.json file")
        try:
            data: Any = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise wrap_exception(exc) from exc

        if isinstance(data, dict):
            username = data.get("username")
            key = data.get("key")
            if isinstance(username, str) and isinstance(key, str):
                self.credentials = KaggleCredentials(username=username, key=key)
                return
        log.error("Invalid kaggle.json format")
        raise KaggleMcpError("Invalid kaggle.json format")

    def request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """Send an authenticated request; raise ApiError on a non-2xx answer."""
        if self.credentials is None:
            raise NotAuthenticatedError()
        auth = (self.credentials.username, self.credentials.key)
        try:
            response = self.session.request(method, url, auth=auth, **kwargs)
        except requests.RequestException as exc:
            raise wrap_exception(exc) from exc
        if _is_success(response):
            return response
        raise ApiError(KaggleError(code=_status_text(response.status_code), message=response.text))

    def list_competitions(
        self,
        search: str = "",
        category: str = "all",
        group: str = "general",
        sort_by: str = "latestDeadline",
        page: int = 1,
    ) -> list[Competition]:
        """List competitions matching the given filters."""
        url = competitions_list_url(self.api_base, search, category, group, sort_by, page)
        log.debug("Fetching competitions from: %s", url)
        response = self.request("GET", url)
        try:
            data = response.json()
        except ValueError as exc:
            raise wrap_exception(exc) from exc
        if not isinstance(data, list):
            raise JsonError(f"invalid type: expected a JSON array, got {type(data).__name__}")
        return [Competition.from_dict(item) for item in data]