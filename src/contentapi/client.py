"""
A compact, robust HTTP client for the Contentful Content Delivery API.
"""

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional
import urllib.parse

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .exceptions import ConfigurationError, raise_for_api_error

logger = logging.getLogger(__name__)


# -------------------------------
# Credentials Model
# -------------------------------


@dataclass
class Credentials:
    """
    Delivery credentials for one Contentful space.

    Both the space identifier and the delivery access token are required;
    construction fails immediately when either is missing.
    """
    space: Optional[str] = None
    access_token: Optional[str] = None
    environment: str = "master"

    def __post_init__(self) -> None:
        missing = [
            name
            for name in ("space", "access_token")
            if not getattr(self, name)
        ]
        if missing:
            raise ConfigurationError(
                f"Missing Contentful credentials: {', '.join(missing)}."
            )
        if not self.environment:
            self.environment = "master"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Credentials":
        """
        Read credentials from CONTENTFUL_SPACE, CONTENTFUL_ACCESS_TOKEN and
        (optionally) CONTENTFUL_ENVIRONMENT.
        """
        env = os.environ if environ is None else environ
        return cls(
            space=env.get("CONTENTFUL_SPACE"),
            access_token=env.get("CONTENTFUL_ACCESS_TOKEN"),
            environment=env.get("CONTENTFUL_ENVIRONMENT", "master"),
        )

    def __repr__(self) -> str:
        return (
            f"Credentials(space={self.space!r}, access_token='***', "
            f"environment={self.environment!r})"
        )


# -------------------------------
# Main Client
# -------------------------------


class ContentfulClient:
    """
    HTTP client for the Contentful Content Delivery API.

    This client handles all communication with the delivery endpoint:
    - Bearer authentication with the space's delivery token
    - Connection pooling, one session per thread
    - Flattening entries and resolving linked entries/assets from `includes`

    Args:
        credentials: Credentials for the space to read from
        host: API host (use 'preview.contentful.com' for the Preview API)
        scheme: URL scheme (default: 'https')
        verify_tls: Whether to verify SSL/TLS certificates (default: True)
        default_timeout: Default request timeout in seconds (default: 30.0)
        pool_connections: Number of connection pools to cache (default: 3)
        pool_maxsize: Maximum number of connections to save in the pool (default: 10)
        max_retries: Transport retries for 429/5xx GETs (default: 0, none)

    Example:
        >>> client = ContentfulClient(Credentials.from_env())
        >>> page = client.get_entries({"content_type": "article", "limit": 5})
        >>> [item["fields"].get("title") for item in page["items"]]
    """

    def __init__(
        self,
        credentials: Credentials,
        *,
        host: str = "cdn.contentful.com",
        scheme: str = "https",
        verify_tls: bool = True,
        default_timeout: float = 30.0,
        pool_connections: int = 3,
        pool_maxsize: int = 10,
        max_retries: int = 0,
    ) -> None:

        self.credentials = credentials
        self.host = host.strip("/")
        self.scheme = scheme
        self.verify_tls = verify_tls
        self.default_timeout = default_timeout
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self.max_retries = max_retries

        # one requests.Session per thread, see `session`
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._build_session()
            self._local.session = session
        return session

    def _build_session(self) -> requests.Session:
        session = requests.Session()

        # Configure connection pooling; the final response is always returned
        # so error statuses reach raise_for_api_error
        retry_strategy = Retry(
            total=self.max_retries,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(
            pool_connections=self.pool_connections,
            pool_maxsize=self.pool_maxsize,
            max_retries=retry_strategy,
        )
        session.mount("http://", adapter)
        session.mount("https://", adapter)
        return session

    # ------------------------------------------------------------------
    # URL helpers
    # ------------------------------------------------------------------

    def _join(self, base: str, path: str) -> str:
        """Join base and path cleanly without stripping segments."""
        return urllib.parse.urljoin(base.rstrip("/") + "/", path.lstrip("/"))

    @property
    def api_base(self) -> str:
        """
        Full base URL of the configured space and environment.

        Returns:
            e.g. 'https://cdn.contentful.com/spaces/abc/environments/master'
        """
        return (
            f"{self.scheme}://{self.host}/spaces/{self.credentials.space}"
            f"/environments/{self.credentials.environment}"
        )

    def endpoint(self, endpoint: str) -> str:
        """Return absolute URL for an API endpoint (e.g. 'entries')."""
        return self._join(self.api_base, endpoint)

    # ------------------------------------------------------------------
    # Low-level request
    # ------------------------------------------------------------------

    def request(
        self,
        method: str,
        endpoint: str,
        *,
        timeout=None,
        headers=None,
        params=None,
    ) -> requests.Response:
        """
        Low-level HTTP request with the delivery token attached.

        Raises:
            APIError: If the API returns an error response
        """
        url = self.endpoint(endpoint)

        req_headers: Dict[str, str] = {}
        # Merge headers but avoid overriding Authorization
        if headers:
            req_headers.update(
                {k: v for k, v in headers.items() if k.lower() != "authorization"}
            )
        req_headers["Authorization"] = f"Bearer {self.credentials.access_token}"

        logger.debug("%s %s params=%s", method.upper(), url, params)

        resp = self.session.request(
            method.upper(),
            url,
            headers=req_headers,
            params=params,
            verify=self.verify_tls,
            timeout=self.default_timeout if timeout is None else timeout,
        )
        raise_for_api_error(resp)

        return resp

    def get(self, endpoint: str, **params: Any) -> requests.Response:
        return self.request("GET", endpoint, params=params)

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def get_entries(self, query: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Fetch entries matching `query` and return a flattened collection.

        Query values are passed through unchanged except that `None` values
        are dropped.

        Returns:
            {"items": [RawEntity, ...], "total": int, "skip": int, "limit": int}
        """
        params = {k: v for k, v in query.items() if v is not None}
        payload = self.get("entries", **params).json()
        return flatten_collection(payload)

    def get_entry(self, entry_id: str, *, include: int = 1) -> Optional[Dict[str, Any]]:
        """Fetch a single entry by id; `None` when the space has no such entry."""
        collection = self.get_entries({"sys.id": entry_id, "include": include, "limit": 1})
        items = collection["items"]
        return items[0] if items else None


# ------------------------------------------------------------------
# Response flattening
# ------------------------------------------------------------------


def _index_includes(payload: Mapping[str, Any]) -> Dict[tuple, Dict[str, Any]]:
    index: Dict[tuple, Dict[str, Any]] = {}
    includes = payload.get("includes") or {}
    for link_type in ("Entry", "Asset"):
        for raw in includes.get(link_type) or []:
            sys = raw.get("sys") or {}
            if sys.get("id"):
                index[(link_type, sys["id"])] = raw
    # Top-level items are linkable too (e.g. a category pointing at another
    # category from the same page).
    for raw in payload.get("items") or []:
        sys = raw.get("sys") or {}
        if sys.get("type") == "Entry" and sys.get("id"):
            index.setdefault(("Entry", sys["id"]), raw)
    return index


def _is_link(value: Any) -> bool:
    return (
        isinstance(value, dict)
        and isinstance(value.get("sys"), dict)
        and value["sys"].get("type") == "Link"
    )


def _flatten_entity(raw: Mapping[str, Any], index, depth: int) -> Dict[str, Any]:
    sys = raw.get("sys") or {}
    entity: Dict[str, Any] = {"id": sys.get("id")}
    if "createdAt" in sys:
        entity["createdAt"] = sys["createdAt"]
    if "updatedAt" in sys:
        entity["updatedAt"] = sys["updatedAt"]
    content_type = ((sys.get("contentType") or {}).get("sys") or {}).get("id")
    if content_type:
        entity["contentType"] = content_type

    fields = {}
    for name, value in (raw.get("fields") or {}).items():
        fields[name] = _resolve(value, index, depth)
    entity["fields"] = fields
    return entity


def _resolve(value: Any, index, depth: int) -> Any:
    if _is_link(value):
        if depth <= 0:
            return None
        sys = value["sys"]
        target = index.get((sys.get("linkType"), sys.get("id")))
        if target is None:
            return None
        return _flatten_entity(target, index, depth - 1)
    if isinstance(value, list):
        return [_resolve(item, index, depth) for item in value]
    return value


def flatten_collection(payload: Mapping[str, Any], *, depth: int = 2) -> Dict[str, Any]:
    """
    Turn a Content Delivery API collection envelope into a raw collection.

    Each entry becomes `{id, createdAt, updatedAt, contentType, fields}`;
    links to entries and assets are replaced by their flattened targets from
    `includes`, up to `depth` levels. Links that cannot be resolved become
    `None`.
    """
    index = _index_includes(payload)
    items: List[Dict[str, Any]] = [
        _flatten_entity(raw, index, depth) for raw in payload.get("items") or []
    ]
    return {
        "items": items,
        "total": payload.get("total", len(items)),
        "skip": payload.get("skip", 0),
        "limit": payload.get("limit", len(items)),
    }
