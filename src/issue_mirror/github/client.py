"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API
for issue retrieval with conditional requests and rate limit tracking.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from dateutil.relativedelta import relativedelta
from githubkit import GitHub
from githubkit.exception import RequestFailed
from pydantic import ValidationError

from issue_mirror.config import RateLimitConfig, get_settings
from issue_mirror.logging import get_logger
from issue_mirror.schemas import (
    GitHubComment,
    GitHubIssue,
    Issue,
    SyncOptions,
    SyncPeriod,
)

from .auth import AuthToken, SettingsTokenProvider, TokenProvider
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .rate_limit import RateLimitInfo, RateLimitStatus

logger = get_logger(__name__)

NOT_MODIFIED = 304


@dataclass
class FetchResult:
    """Outcome of one paginated issue listing."""

    issues: list[Issue]
    """Issue summaries (no comments), newest-updated first."""

    rate_limit: RateLimitInfo
    """Quota as reported by the most recent response."""

    etag: str | None = None
    """ETag of the first page, to send back on the next conditional request."""

    has_more: bool = False
    """True if GitHub has issues beyond what was fetched."""

    not_modified: bool = False
    """True if the conditional request was answered with 304."""

    skipped_pull_requests: int = field(default=0, repr=False)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as the ISO-8601 UTC string GitHub expects."""
    return moment.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


def calculate_since(period: SyncPeriod | str, now: datetime | None = None) -> str | None:
    """Compute the 'since' filter for a sync period.

    Uses calendar arithmetic that clamps to the end of shorter months, so
    March 31 minus one month is the last day of February, never March 3.

    Args:
        period: Sync period ("3months", "6months", "1year" or "all")
        now: Reference time (defaults to the current UTC time)

    Returns:
        ISO-8601 timestamp, or None for "all"
    """
    months = SyncPeriod(period).months
    if months is None:
        return None
    now = now or datetime.now(UTC)
    return format_timestamp(now - relativedelta(months=months))


def _matches_filters(issue: Issue, options: SyncOptions) -> bool:
    """Apply the label and milestone allow-lists (case-insensitive)."""
    if options.label_filter:
        wanted = {name.lower() for name in options.label_filter}
        if not any(name.lower() in wanted for name in issue.label_names):
            return False
    if options.milestone_filter:
        wanted = {title.lower() for title in options.milestone_filter}
        if issue.milestone is None or issue.milestone.title.lower() not in wanted:
            return False
    return True


class GitHubClient:
    """Async GitHub API client for issue retrieval.

    The token is requested from the provider on first use and cached for
    the lifetime of the client; call ``reset_credential_cache()`` after a
    token rotation.

    Usage:
        async with GitHubClient() as client:
            result = await client.fetch_issues("octo", "hello-world", SyncOptions())
            for issue in result.issues:
                print(issue.title)
    """

    def __init__(
        self,
        token_provider: TokenProvider | None = None,
        *,
        page_size: int | None = None,
        api_url: str | None = None,
        rate_limit_config: RateLimitConfig | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token_provider: Source of credentials. Defaults to GITHUB_TOKEN from settings.
            page_size: Issues per list request (max 100). Defaults to settings.
            api_url: REST API base URL. Defaults to settings.
            rate_limit_config: Thresholds for rate limit warnings.
        """
        settings = get_settings()
        self._token_provider = token_provider or SettingsTokenProvider()
        self._page_size = min(page_size or settings.sync.page_size, 100)
        self._api_url = api_url or settings.github_api_url
        self._rate_limit_config = rate_limit_config or settings.rate_limit
        self._token: AuthToken | None = None
        self._client: GitHub[Any] | None = None
        self._rate_limit: RateLimitInfo | None = None

    async def _get_github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance.

        Raises:
            GitHubAuthenticationError: Propagated unchanged from the token provider.
        """
        if self._client is None:
            if self._token is None:
                self._token = await self._token_provider.get_token()
            # ETags are handled here, so githubkit's own HTTP cache stays off
            self._client = GitHub(self._token.token, base_url=self._api_url, http_cache=False)
        return self._client

    @property
    def rate_limit(self) -> RateLimitInfo | None:
        """Most recently observed rate limit (None before the first request)."""
        return self._rate_limit

    def reset_credential_cache(self) -> None:
        """Forget the cached token so the next call asks the provider again."""
        self._token = None
        self._client = None

    def _update_rate_limit_from_response(self, response: Any) -> RateLimitInfo:
        """Extract rate limit headers from a response and remember them.

        Args:
            response: A githubkit Response (or httpx.Response) with headers.

        Returns:
            The parsed rate limit, or the last known one if headers are unusable.
        """
        try:
            headers: Mapping[str, str] = getattr(response, "headers", None) or {}
            info = RateLimitInfo.from_headers(headers)
        except (TypeError, ValueError) as e:
            logger.debug("Failed to parse rate limit headers: {}", e)
            if self._rate_limit is not None:
                return self._rate_limit
            info = RateLimitInfo(limit=0, remaining=0, reset=datetime.now(UTC))

        self._rate_limit = info
        status = info.get_status(self._rate_limit_config)
        if status in (RateLimitStatus.CRITICAL, RateLimitStatus.EXHAUSTED):
            logger.warning(
                "GitHub rate limit {}: {}/{} remaining, resets in {}s",
                status.value,
                info.remaining,
                info.limit,
                info.seconds_until_reset,
            )
        return info

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Rate Limit Info
    # -------------------------------------------------------------------------
    async def get_rate_limit(self) -> RateLimitInfo:
        """Get current core rate limit status.

        Note: The /rate_limit endpoint does not count against quota.
        """
        github = await self._get_github()
        try:
            resp = await github.rest.rate_limit.async_get()
        except RequestFailed as e:
            raise self._handle_error(e) from e
        info = RateLimitInfo.from_api_response(resp.json())
        self._rate_limit = info
        return info

    # -------------------------------------------------------------------------
    # Issue Methods
    # -------------------------------------------------------------------------
    async def fetch_issues(
        self,
        owner: str,
        repo: str,
        options: SyncOptions,
        *,
        since: str | None = None,
        etag: str | None = None,
    ) -> FetchResult:
        """List issue summaries, newest-updated first.

        Pull requests are dropped and label/milestone filters applied before
        counting toward ``options.max_issues``. Pages are requested until
        GitHub reports no next page, a page is empty, or enough issues were
        collected.

        Args:
            owner: Repository owner
            repo: Repository name
            options: Sync options (max_issues, period, closed issues, filters)
            since: Only issues updated at or after this ISO-8601 time.
                   Defaults to a value derived from options.sync_period.
            etag: ETag from a previous listing; sent as If-None-Match on
                  the first page only.

        Returns:
            FetchResult. A 304 answer yields no issues, has_more=False and
            the previous etag.
        """
        github = await self._get_github()
        since = since or calculate_since(options.sync_period)

        params: dict[str, Any] = {
            "owner": owner,
            "repo": repo,
            "state": "all" if options.include_closed_issues else "open",
            "sort": "updated",
            "direction": "desc",
            "per_page": min(options.max_issues, self._page_size),
        }
        if since:
            params["since"] = since

        logger.debug(
            "Listing issues for {}/{} (since={}, etag={}, max={})",
            owner,
            repo,
            since,
            etag,
            options.max_issues,
        )

        collected: list[Issue] = []
        skipped_prs = 0
        response_etag: str | None = None
        rate_limit: RateLimitInfo | None = None
        has_next = False
        page = 1

        while True:
            headers = {"If-None-Match": etag} if etag and page == 1 else None
            try:
                resp = await github.rest.issues.async_list_for_repo(
                    **params, page=page, headers=headers
                )
            except RequestFailed as e:
                if e.response.status_code == NOT_MODIFIED:
                    return self._not_modified(e.response, etag)
                raise self._handle_error(e) from e

            if resp.status_code == NOT_MODIFIED:
                return self._not_modified(resp, etag)

            rate_limit = self._update_rate_limit_from_response(resp)
            if page == 1:
                response_etag = resp.headers.get("etag")

            items: list[dict[str, Any]] = resp.json()
            has_next = 'rel="next"' in resp.headers.get("link", "")
            if not items:
                break

            for raw in items:
                try:
                    gh_issue = GitHubIssue.model_validate(raw)
                except ValidationError as e:
                    logger.warning("Skipping malformed issue payload: {}", e)
                    continue
                if gh_issue.is_pull_request:
                    skipped_prs += 1
                    continue
                issue = gh_issue.to_issue()
                if _matches_filters(issue, options):
                    collected.append(issue)

            if len(collected) >= options.max_issues or not has_next:
                break
            page += 1

        has_more = has_next or len(collected) > options.max_issues
        issues = collected[: options.max_issues]

        logger.info(
            "Fetched {} issues for {}/{} ({} pull requests skipped, has_more={})",
            len(issues),
            owner,
            repo,
            skipped_prs,
            has_more,
        )

        assert rate_limit is not None
        return FetchResult(
            issues=issues,
            rate_limit=rate_limit,
            etag=response_etag,
            has_more=has_more,
            skipped_pull_requests=skipped_prs,
        )

    def _not_modified(self, response: Any, etag: str | None) -> FetchResult:
        """Build the result for a 304 answer to a conditional request."""
        logger.info("Issue list not modified since last sync (etag={})", etag)
        return FetchResult(
            issues=[],
            rate_limit=self._update_rate_limit_from_response(response),
            etag=etag,
            has_more=False,
            not_modified=True,
        )

    async def fetch_issue_details(self, owner: str, repo: str, issue_number: int) -> Issue:
        """Get full details for a single issue, including every comment.

        Comments are paginated to the end regardless of any max_issues cap.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue number

        Returns:
            Issue with ``comments`` populated

        Raises:
            GitHubNotFoundError: If the issue doesn't exist
        """
        github = await self._get_github()
        try:
            resp = await github.rest.issues.async_get(
                owner=owner,
                repo=repo,
                issue_number=issue_number,
            )
            self._update_rate_limit_from_response(resp)
            gh_issue = GitHubIssue.model_validate(resp.json())

            comments: list[GitHubComment] = []
            comment_data: Any
            async for comment_data in github.paginate(
                github.rest.issues.async_list_comments,
                map_func=lambda r: r.json(),
                owner=owner,
                repo=repo,
                issue_number=issue_number,
                per_page=100,
            ):
                comments.append(GitHubComment.model_validate(comment_data))
        except RequestFailed as e:
            if e.response.status_code == 404:
                raise GitHubNotFoundError(
                    f"Issue #{issue_number} not found in {owner}/{repo}"
                ) from e
            raise self._handle_error(e) from e

        logger.debug("Fetched issue #{} with {} comments", issue_number, len(comments))
        return gh_issue.to_issue(comments)

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        # Error responses still carry rate limit headers
        self._update_rate_limit_from_response(error.response)

        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status == 403:
            headers = error.response.headers
            if "x-ratelimit-remaining" in headers:
                remaining = int(headers.get("x-ratelimit-remaining", "0"))
                if remaining == 0:
                    reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                    reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                    return GitHubRateLimitError(
                        "GitHub rate limit exceeded",
                        reset_at=reset_at,
                    )
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
