"""
Arc share page client.

This module fetches an Arc folder share page, locates the Next.js data
island embedded in it and validates the folder payload it carries. Every
failure is raised as one of four error kinds so callers can decide whether
a retry makes sense (only FetchFailure may heal by itself).
"""

import json
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from pydantic import ValidationError

from .models import ArcFolder

DEFAULT_SHARE_ORIGIN = "https://arc.net"
DEFAULT_DATA_ELEMENT_ID = "__NEXT_DATA__"
DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class ArcShareError(Exception):
    """Base exception for Arc share page extraction errors."""

    pass


class FetchFailure(ArcShareError):
    """Raised on network, DNS, timeout or non-2xx errors fetching the share page."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class MalformedDocument(ArcShareError):
    """Raised when the share page does not contain the expected data island."""

    pass


class MalformedJson(ArcShareError):
    """Raised when the data island is not parseable JSON."""

    pass


class SchemaViolation(ArcShareError):
    """Raised when the folder payload does not match the expected structure."""

    def __init__(self, message: str, violations: Optional[List[str]] = None):
        self.violations = violations or []
        if self.violations:
            message = f"{message}: {', '.join(self.violations)}"
        super().__init__(message)


def build_share_url(share_id: str, origin: str = DEFAULT_SHARE_ORIGIN) -> str:
    """Build the canonical share page address for a folder id."""
    return f"{origin.rstrip('/')}/folder/{share_id}"


def parse_share_url(value: str, origin: str = DEFAULT_SHARE_ORIGIN) -> str:
    """
    Extract the folder id from a share link, or return a bare id unchanged.

    Args:
        value: Folder id or full share link (``https://arc.net/folder/<id>``)
        origin: Share service origin the link must belong to

    Returns:
        Folder identifier

    Raises:
        ValueError: If the link is not a folder link on the share service
    """
    value = value.strip()
    if "://" not in value:
        if not value or "/" in value:
            raise ValueError(f"Invalid folder identifier: {value!r}")
        return value

    parsed = urlparse(value)
    expected_host = urlparse(origin).hostname
    if parsed.hostname != expected_host:
        raise ValueError(f"URL must be from {expected_host} domain")

    parts = [part for part in parsed.path.split("/") if part]
    if len(parts) != 2 or parts[0] != "folder":
        raise ValueError(f"Not a folder share link: {value}")
    return parts[1]


class ArcShareClient:
    """
    Client that turns an Arc folder id into a validated ArcFolder.

    The client makes exactly one GET request per extraction and never
    retries; retry policy belongs to the caller.
    """

    def __init__(
        self,
        origin: str = DEFAULT_SHARE_ORIGIN,
        timeout: float = DEFAULT_TIMEOUT,
        data_element_id: str = DEFAULT_DATA_ELEMENT_ID,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the share client.

        Args:
            origin: Share service origin (scheme and host)
            timeout: Request timeout in seconds
            data_element_id: Id of the script element holding the page data
            user_agent: User-Agent header sent with the request
            session: Optional pre-configured requests session
        """
        self.origin = origin.rstrip("/")
        self.timeout = timeout
        self.data_element_id = data_element_id
        self.logger = logging.getLogger(__name__)

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            }
        )

    def __enter__(self) -> "ArcShareClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def share_url(self, arc_id: str) -> str:
        return build_share_url(arc_id, self.origin)

    def extract_folder_data(self, arc_id: str) -> ArcFolder:
        """
        Fetch and validate the folder behind a share id.

        Args:
            arc_id: Arc folder share identifier

        Returns:
            Validated ArcFolder, exactly as found on the page

        Raises:
            FetchFailure: If the page cannot be fetched
            MalformedDocument: If the data island is missing
            MalformedJson: If the data island is not valid JSON
            SchemaViolation: If the payload does not match the folder schema
        """
        url = self.share_url(arc_id)

        try:
            html_content = self._fetch_page(url)
            script_content = self._find_data_island(html_content)
            page_data = self._parse_json(script_content)
            folder = self._validate_folder(page_data)
        except ArcShareError as e:
            self.logger.error(f"Error extracting Arc folder {arc_id}: {type(e).__name__}: {e}")
            raise

        self.logger.info(
            f"Extracted Arc folder {arc_id} with {len(folder.data.items)} items"
        )
        return folder

    def _fetch_page(self, url: str) -> str:
        """
        Fetch the share page HTML.

        Raises:
            FetchFailure: On any request error or non-2xx status
        """
        self.logger.debug(f"Fetching Arc share page: {url}")
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.exceptions.Timeout as e:
            raise FetchFailure(f"Timed out after {self.timeout}s fetching {url}") from e
        except requests.exceptions.RequestException as e:
            raise FetchFailure(f"Error fetching {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise FetchFailure(
                f"HTTP {response.status_code} fetching {url}",
                status_code=response.status_code,
            )

        return response.text

    def _find_data_island(self, html_content: str) -> str:
        """
        Locate the hydration script element and return its text.

        Raises:
            MalformedDocument: If the element is missing or empty
        """
        soup = BeautifulSoup(html_content, "html.parser")
        script = soup.find("script", id=self.data_element_id)

        if script is None:
            raise MalformedDocument(
                f"Share page has no <script id=\"{self.data_element_id}\"> element"
            )

        content = script.string if script.string is not None else script.get_text()
        if not content or not content.strip():
            raise MalformedDocument(
                f"Share page <script id=\"{self.data_element_id}\"> element is empty"
            )

        return content

    def _parse_json(self, script_content: str) -> Any:
        """
        Parse the data island as JSON.

        Raises:
            MalformedJson: On a JSON syntax error
        """
        try:
            return json.loads(script_content)
        except json.JSONDecodeError as e:
            raise MalformedJson(f"Invalid JSON in share page data: {e}") from e

    def _validate_folder(self, page_data: Any) -> ArcFolder:
        """
        Validate ``props.pageProps`` against the folder schema.

        Raises:
            SchemaViolation: If the path is missing or validation fails
        """
        page_props = self._get_page_props(page_data)

        try:
            return ArcFolder.model_validate(page_props)
        except ValidationError as e:
            raise SchemaViolation(
                "Arc folder parsing issue", violations=format_violations(e)
            ) from e

    def _get_page_props(self, page_data: Any) -> Dict[str, Any]:
        node = page_data
        for key in ("props", "pageProps"):
            if not isinstance(node, dict) or key not in node:
                raise SchemaViolation(
                    "Share page data has no page properties",
                    violations=["props.pageProps"],
                )
            node = node[key]

        if not isinstance(node, dict):
            raise SchemaViolation(
                "Share page properties are not an object",
                violations=["props.pageProps"],
            )
        return node


def format_violations(error: ValidationError) -> List[str]:
    """
    Convert a pydantic ValidationError into dotted field paths.

    Args:
        error: Pydantic ValidationError instance

    Returns:
        List of violated field paths with their messages
    """
    violations = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "<root>"
        violations.append(f"{location} ({detail['msg']})")
    return violations
