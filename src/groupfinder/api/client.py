"""Group Finder REST API client.

Thin blocking wrapper over the backend's JSON-over-HTTP API. Every call
performs exactly one request; there is no retry and no caching. Calls are
safe from any thread and are meant to run on the background scheduler.

HTTP errors and transport failures are logged and turned into safe
defaults (empty list, None, False). A malformed listings payload on fetch
is the exception: it raises ListingDecodeError so callers can tell "no
groups" from "broken server response".
"""

import http.client
import logging
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Mapping
from typing import Any, Protocol

from groupfinder.api.protocol import (
    ListingDecodeError,
    decode_listing,
    decode_listing_list,
    encode_json,
    listing_to_dict,
)
from groupfinder.models.activity import Activity
from groupfinder.models.listing import GroupListing

logger = logging.getLogger(__name__)

GROUPS_PATH = "/api/groups"

# Request timeout in seconds
REQUEST_TIMEOUT = 10

USER_AGENT = "GroupFinder/1.0"

_JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# Connection refused, DNS failure, timeout, dropped connection, or a server
# URL urllib cannot use (ValueError: unknown url type)
_TRANSPORT_ERRORS = (OSError, http.client.HTTPException, ValueError)


class ServerUrlSource(Protocol):
    """Anything that can report the configured backend base URL."""

    def get_server_url(self) -> str: ...


class GroupFinderClient:
    """Blocking client for the Group Finder backend.

    The base URL is read from the config source on every call, so a changed
    server setting takes effect on the next request.

    Example:
        client = GroupFinderClient(config)
        listings = client.get_groups(Activity.NEX)
        created = client.create_group(GroupListing(Activity.NEX, 1, 4, "Alice"))
    """

    def __init__(self, config: ServerUrlSource, timeout: float = REQUEST_TIMEOUT) -> None:
        """Initialize the client.

        Args:
            config: Source of the backend base URL.
            timeout: Per-request timeout in seconds.
        """
        self._config = config
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        """Return the current backend base URL without a trailing slash."""
        return self._config.get_server_url().rstrip("/")

    def _groups_url(self, group_id: str | None = None) -> str:
        url = self.base_url + GROUPS_PATH
        if group_id is not None:
            url += "/" + urllib.parse.quote(group_id, safe="")
        return url

    def _send(
        self,
        method: str,
        url: str,
        payload: Any = None,
    ) -> tuple[int, bytes]:
        """Perform one HTTP request (blocking).

        Args:
            method: HTTP verb.
            url: Absolute request URL.
            payload: JSON-serializable body, or None for no body.

        Returns:
            Tuple of (status code, response body). Error statuses return an
            empty body.

        Raises:
            OSError: On transport failure (includes urllib.error.URLError).
            http.client.HTTPException: On a broken HTTP exchange.
            ValueError: If the URL has no usable scheme.
        """
        headers = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        data = None
        if payload is not None:
            data = encode_json(payload)
            headers["Content-Type"] = _JSON_CONTENT_TYPE

        req = urllib.request.Request(url, data=data, headers=headers, method=method)
        try:
            with urllib.request.urlopen(req, timeout=self._timeout) as response:
                return response.status, response.read()
        except urllib.error.HTTPError as e:
            e.close()
            return e.code, b""

    @staticmethod
    def _is_success(status: int) -> bool:
        return 200 <= status < 300

    def get_groups(self, activity_filter: Activity | None = None) -> list[GroupListing]:
        """Fetch current listings, optionally for a single activity.

        Args:
            activity_filter: Only return listings for this activity.

        Returns:
            Listings from the server, or an empty list on HTTP or network error.

        Raises:
            ListingDecodeError: If the server answered 2xx with a malformed body.
        """
        url = self._groups_url()
        if activity_filter is not None:
            url += "?" + urllib.parse.urlencode({"activity": activity_filter.wire_name})

        try:
            status, body = self._send("GET", url)
        except _TRANSPORT_ERRORS as e:
            logger.warning("Failed to fetch groups: %s", e)
            return []

        if not self._is_success(status):
            logger.warning("Failed to fetch groups: HTTP %d", status)
            return []

        return decode_listing_list(body)

    def create_group(self, listing: GroupListing) -> GroupListing | None:
        """Post a new listing.

        Args:
            listing: Draft listing to create.

        Returns:
            The canonical listing with its server id, or None on failure.
        """
        try:
            status, body = self._send("POST", self._groups_url(), listing_to_dict(listing))
        except _TRANSPORT_ERRORS as e:
            logger.warning("Failed to create group: %s", e)
            return None

        if not self._is_success(status):
            logger.warning("Failed to create group: HTTP %d", status)
            return None

        try:
            return decode_listing(body)
        except ListingDecodeError as e:
            logger.warning("Failed to create group: bad response: %s", e)
            return None

    def delete_group(self, group_id: str) -> bool:
        """Delete a listing by id.

        Args:
            group_id: Server id of the listing.

        Returns:
            True if the server confirmed the deletion with a 2xx status.
        """
        try:
            status, _ = self._send("DELETE", self._groups_url(group_id))
        except _TRANSPORT_ERRORS as e:
            logger.warning("Failed to delete group %s: %s", group_id, e)
            return False

        if not self._is_success(status):
            logger.warning("Failed to delete group %s: HTTP %d", group_id, status)
            return False
        return True

    def update_group(self, group_id: str, fields: Mapping[str, Any]) -> GroupListing | None:
        """Partially update a listing.

        Args:
            group_id: Server id of the listing.
            fields: Wire-level fields to change, e.g. {"currentSize": 3}.

        Returns:
            The updated canonical listing, or None on failure.
        """
        try:
            status, body = self._send("PATCH", self._groups_url(group_id), dict(fields))
        except _TRANSPORT_ERRORS as e:
            logger.warning("Failed to update group %s: %s", group_id, e)
            return None

        if not self._is_success(status):
            logger.warning("Failed to update group %s: HTTP %d", group_id, status)
            return None

        try:
            return decode_listing(body)
        except ListingDecodeError as e:
            logger.warning("Failed to update group %s: bad response: %s", group_id, e)
            return None
