"""GitHub Releases adapter for the ``ReleaseSource`` Protocol.

Bridge boundary
---------------
All HTTP lives here, on a ``requests.Session``.  The resolver and
synchronizer see only ``Release``/``Asset`` models and the kernsync error
taxonomy:

- HTTP 404 becomes ``NotFound``.
- Any other non-2xx status, connection error or timeout becomes
  ``NetworkFailure`` naming the remote call, with the cause chained.

Metadata GETs are bounded by a ``(connect, read)`` timeout and retried with
backoff by urllib3.  Asset downloads stream in chunks under an overall
deadline that grows with the expected artifact size, so a stalled transfer
cannot hang the process while a large kernel still gets enough time.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from kernsync import __version__
from kernsync.errors import NetworkFailure, NotFound
from kernsync.models.releases import Asset, Release

if TYPE_CHECKING:
    from kernsync.config import SyncSettings

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
_PER_PAGE = 100
_MAX_PAGES = 10
_CHUNK_SIZE = 256 * 1024


def download_timeout(
    expected_size: int,
    *,
    base: float = 60.0,
    min_rate: float = 256 * 1024,
) -> float:
    """Overall download deadline in seconds for an artifact of *expected_size* bytes.

    ``base`` covers connection setup and small files; ``min_rate`` is the
    slowest throughput (bytes/s) tolerated before the transfer counts as
    stalled.
    """
    if min_rate <= 0:
        raise ValueError("min_rate must be positive")
    return base + max(expected_size, 0) / min_rate


def release_from_payload(payload: dict[str, Any]) -> Release:
    """Build a ``Release`` from a GitHub REST release object."""
    tag = str(payload.get("tag_name") or "")
    assets = tuple(
        Asset(
            id=int(item["id"]),
            name=str(item.get("name") or ""),
            size=int(item.get("size") or 0),
            download_url=str(item.get("browser_download_url") or ""),
            release_tag=tag,
        )
        for item in payload.get("assets") or []
    )
    return Release.model_validate(
        {
            "tag": tag,
            "name": payload.get("name") or "",
            "draft": bool(payload.get("draft")),
            "prerelease": bool(payload.get("prerelease")),
            "published_at": payload.get("published_at"),
            "body": payload.get("body") or "",
            "assets": assets,
        }
    )


class GitHubReleaseSource:
    """Reads releases and streams assets from the GitHub REST API.

    Parameters
    ----------
    api_url:
        API root, ``https://api.github.com`` or a GitHub Enterprise URL.
    token:
        Optional token; raises the API rate limit and grants access to
        private repositories.
    connect_timeout, read_timeout:
        Per-request socket timeouts in seconds.
    retries:
        Bounded retries with backoff for idempotent GETs (0 disables).
    download_base_timeout, download_min_rate:
        Inputs to ``download_timeout`` for asset transfers.
    session:
        Pre-built session; when given, no retry adapter is mounted.
    """

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        token: str = "",
        *,
        connect_timeout: float = 10.0,
        read_timeout: float = 30.0,
        retries: int = 2,
        download_base_timeout: float = 60.0,
        download_min_rate: float = 256 * 1024,
        session: requests.Session | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._timeout = (connect_timeout, read_timeout)
        self._download_base = download_base_timeout
        self._download_min_rate = download_min_rate

        if session is None:
            session = requests.Session()
            if retries > 0:
                retry = Retry(
                    total=retries,
                    backoff_factor=0.5,
                    status_forcelist=(429, 500, 502, 503, 504),
                    allowed_methods=frozenset({"GET"}),
                    raise_on_status=False,
                )
                adapter = HTTPAdapter(max_retries=retry)
                session.mount("https://", adapter)
                session.mount("http://", adapter)
        session.headers.update(
            {
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": f"kernsync/{__version__}",
            }
        )
        if token:
            session.headers["Authorization"] = f"Bearer {token}"
        self._session = session

    @classmethod
    def from_settings(cls, settings: SyncSettings) -> GitHubReleaseSource:
        return cls(
            api_url=settings.github_api_url,
            token=settings.github_token,
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.metadata_timeout,
            retries=settings.retries,
            download_base_timeout=settings.download_base_timeout,
            download_min_rate=settings.download_min_rate,
        )

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    def get_latest_release(self, owner: str, repo: str) -> Release:
        payload = self._get_json(
            "get_latest_release",
            f"{owner}/{repo}",
            f"{self._api_url}/repos/{owner}/{repo}/releases/latest",
        )
        return release_from_payload(payload)

    def get_release_by_tag(self, owner: str, repo: str, tag: str) -> Release:
        payload = self._get_json(
            "get_release_by_tag",
            f"{owner}/{repo}@{tag}",
            f"{self._api_url}/repos/{owner}/{repo}/releases/tags/{quote(tag, safe='')}",
        )
        return release_from_payload(payload)

    def list_releases(self, owner: str, repo: str) -> list[Release]:
        target = f"{owner}/{repo}"
        url: str | None = f"{self._api_url}/repos/{owner}/{repo}/releases"
        params: dict[str, Any] | None = {"per_page": _PER_PAGE}
        releases: list[Release] = []

        for _ in range(_MAX_PAGES):
            if url is None:
                break
            response = self._get("list_releases", target, url, params=params)
            page = self._decode("list_releases", target, response)
            releases.extend(release_from_payload(item) for item in page)
            # The "next" link already carries the query string.
            url = response.links.get("next", {}).get("url")
            params = None
        else:
            if url is not None:
                logger.warning(
                    "Stopped listing %s after %d pages", target, _MAX_PAGES
                )
        return releases

    # ------------------------------------------------------------------
    # Download
    # ------------------------------------------------------------------

    def download_asset(
        self,
        owner: str,
        repo: str,
        asset_id: int,
        *,
        expected_size: int = 0,
    ) -> Iterator[bytes]:
        budget = download_timeout(
            expected_size,
            base=self._download_base,
            min_rate=self._download_min_rate,
        )
        url = f"{self._api_url}/repos/{owner}/{repo}/releases/assets/{asset_id}"
        return self._stream(url, f"{owner}/{repo} asset {asset_id}", budget)

    def _stream(self, url: str, target: str, budget: float) -> Iterator[bytes]:
        deadline = time.monotonic() + budget
        response = self._get(
            "download_asset",
            target,
            url,
            headers={"Accept": "application/octet-stream"},
            stream=True,
        )
        with response:
            self._check_status("download_asset", target, response)
            try:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if time.monotonic() > deadline:
                        raise NetworkFailure(
                            "download_asset",
                            target,
                            f"exceeded download deadline of {budget:.0f}s",
                        )
                    if chunk:
                        yield chunk
            except requests.RequestException as exc:
                raise NetworkFailure("download_asset", target, str(exc)) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get(
        self,
        operation: str,
        target: str,
        url: str,
        **kwargs: Any,
    ) -> requests.Response:
        logger.debug("GET %s (%s)", url, operation)
        try:
            return self._session.get(url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise NetworkFailure(operation, target, str(exc)) from exc

    @staticmethod
    def _check_status(operation: str, target: str, response: requests.Response) -> None:
        if response.status_code == 404:
            raise NotFound(f"{operation}: {target} not found")
        if not response.ok:
            raise NetworkFailure(
                operation,
                target,
                f"HTTP {response.status_code}: {response.text[:200]}",
            )

    def _decode(self, operation: str, target: str, response: requests.Response) -> Any:
        self._check_status(operation, target, response)
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkFailure(operation, target, "invalid JSON in response") from exc

    def _get_json(self, operation: str, target: str, url: str) -> dict[str, Any]:
        response = self._get(operation, target, url)
        return self._decode(operation, target, response)
