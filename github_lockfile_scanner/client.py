"""GitHub REST API client using httpx with bounded retry on rate limiting."""

import time

import httpx

from . import console
from .models import ApiResponse
from .rate_limit import RateLimiter
from .settings import get_settings

MAX_ATTEMPTS = 5
INITIAL_BACKOFF = 60  # seconds; doubles after every failed attempt
BACKOFF_FACTOR = 2

# GitHub signals both primary and secondary rate limits with these
RATE_LIMIT_STATUSES = (403, 429)

_TRANSIENT_ERRORS = (
    httpx.ConnectError,
    httpx.ReadError,
    httpx.RemoteProtocolError,
    httpx.TimeoutException,
)


class MissingCredentialError(RuntimeError):
    pass


class GitHubApiError(RuntimeError):
    """A response the client will not retry."""

    def __init__(self, message: str, status: int | None = None, url: str | None = None):
        super().__init__(message)
        self.status = status
        self.url = url


class RetriesExhaustedError(GitHubApiError):
    pass


class GitHubClient:
    """Thin client for GET requests against the GitHub REST API.

    Each call to get() is independent: the backoff schedule restarts at
    INITIAL_BACKOFF for every URL. The rate limiter is shared, so when several
    threads use one client they all wait out the same exhausted window.
    """

    def __init__(self, token: str | None = None, rate_limiter: RateLimiter | None = None):
        settings = get_settings()
        token = token or settings.github_token
        if not token:
            raise MissingCredentialError("GITHUB_TOKEN is not set")
        self.api_url = settings.github_api_url.rstrip("/")
        self.rate_limiter = rate_limiter or RateLimiter()
        self._client = httpx.Client(
            headers={
                "Authorization": f"bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": settings.user_agent,
            },
            timeout=30.0,
        )

    def get(self, url: str, params: dict | None = None) -> ApiResponse:
        """GET a URL, retrying on 403/429 and transport errors.

        Args:
            url: Absolute URL, or a path relative to the API root
            params: Query parameters dict

        Returns:
            ApiResponse for the 200 response.

        Raises:
            GitHubApiError: any status other than 200, 403 or 429.
            RetriesExhaustedError: MAX_ATTEMPTS attempts without a 200.
        """
        if not url.startswith(("http://", "https://")):
            url = f"{self.api_url}/{url.lstrip('/')}"

        backoff = INITIAL_BACKOFF
        for attempt in range(MAX_ATTEMPTS):
            try:
                resp = self._client.get(url, params=params)
            except _TRANSIENT_ERRORS as e:
                console.warning(
                    f"{type(e).__name__}: {e}, retrying in {backoff} seconds "
                    f"({attempt + 1}/{MAX_ATTEMPTS})..."
                )
            else:
                if resp.status_code == 200:
                    # Throttle now so the *next* request lands in a fresh window
                    self.rate_limiter.check(resp.headers)
                    return ApiResponse(
                        status=resp.status_code,
                        body=resp.text,
                        headers=resp.headers,
                        links=resp.links,
                    )
                if resp.status_code not in RATE_LIMIT_STATUSES:
                    raise GitHubApiError(
                        f"GitHub API error: HTTP {resp.status_code} for {url}",
                        status=resp.status_code,
                        url=url,
                    )
                console.error(
                    f"Rate-limited (HTTP {resp.status_code}), retrying in {backoff} seconds "
                    f"({attempt + 1}/{MAX_ATTEMPTS})..."
                )
            time.sleep(backoff)
            backoff *= BACKOFF_FACTOR

        raise RetriesExhaustedError(f"Exceeded {MAX_ATTEMPTS} retries for {url}", url=url)

    def close(self):
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
