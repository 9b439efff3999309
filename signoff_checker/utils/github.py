import base64
import binascii
from typing import Any, AsyncIterator
from urllib.parse import quote

import httpx
import structlog

from signoff_checker.constants import PER_PAGE
from signoff_checker.exceptions import RemoteError, RemoteNotFound

logger = structlog.get_logger(__name__)


class GitHubAPIClient:
    """Async client for the subset of the GitHub REST API the checker needs."""

    DEFAULT_TIMEOUT = 10.0

    def __init__(
        self,
        token: str,
        base_url: str = "https://api.github.com",
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"token {token}",
        }

    def _url(self, path: str) -> str:
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url}{path}"

    @staticmethod
    def _protection_path(owner: str, repo: str, branch: str) -> str:
        # branch names may contain slashes
        return f"/repos/{owner}/{repo}/branches/{quote(branch, safe='')}/protection"

    async def request(
        self,
        method: str,
        url: str,
        context: dict | None = None,
        **kwargs,
    ) -> httpx.Response:
        """Execute a request, raising RemoteNotFound on 404 and RemoteError otherwise."""
        context = context or {}
        url = self._url(url)
        kwargs.setdefault("timeout", self.timeout)

        try:
            async with httpx.AsyncClient() as client:
                response = await getattr(client, method)(
                    url, headers=self.headers, **kwargs
                )
                if response.status_code == 404:
                    logger.debug("Resource not found", url=url, **context)
                    raise RemoteNotFound(f"{method.upper()} {url} returned 404")
                response.raise_for_status()
                return response
        except httpx.RequestError as e:
            logger.error("Request error", url=url, error=str(e), **context)
            raise RemoteError(f"{method.upper()} {url} failed: {e}") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "HTTP error",
                url=url,
                status_code=e.response.status_code,
                response_text=e.response.text,
                **context,
            )
            raise RemoteError(
                f"{method.upper()} {url} returned {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e

    async def paginate(
        self,
        url: str,
        params: dict | None = None,
        per_page: int = PER_PAGE,
        context: dict | None = None,
    ) -> AsyncIterator[Any]:
        """Yield items page by page, following Link rel="next" until exhausted.

        Every call starts again from the first page. Later pages are only
        requested once the caller has consumed the items of the current one.
        """
        next_url: str | None = url
        next_params: dict | None = {**(params or {}), "per_page": per_page}

        while next_url:
            response = await self.request(
                "get", next_url, context=context, params=next_params
            )
            for item in response.json():
                yield item

            next_url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            next_params = None

    def list_pull_request_commits(
        self, owner: str, repo: str, number: int
    ) -> AsyncIterator[dict[str, Any]]:
        return self.paginate(
            f"/repos/{owner}/{repo}/pulls/{number}/commits",
            context={"owner": owner, "repo": repo, "pr_number": number},
        )

    async def create_commit_status(
        self,
        owner: str,
        repo: str,
        sha: str,
        state: str,
        context: str,
        description: str | None = None,
        target_url: str | None = None,
    ) -> dict[str, Any]:
        payload = {"state": state, "context": context}
        if description:
            payload["description"] = description
        if target_url:
            payload["target_url"] = target_url

        response = await self.request(
            "post",
            f"/repos/{owner}/{repo}/statuses/{sha}",
            json=payload,
            context={"owner": owner, "repo": repo, "sha": sha},
        )
        return response.json()

    def list_org_repositories(self, org: str) -> AsyncIterator[dict[str, Any]]:
        return self.paginate(
            f"/orgs/{org}/repos", params={"type": "all"}, context={"org": org}
        )

    async def get_file_content(self, contents_url: str, path: str) -> str:
        """Fetch a file through a repository's ``contents_url`` template.

        A path that is not a regular file (e.g. a directory listing) reads as "".
        """
        url = contents_url.replace("{+path}", path, 1)
        response = await self.request("get", url, context={"path": path})
        data = response.json()
        if not isinstance(data, dict):
            logger.debug("Contents path is not a file", url=url)
            return ""
        try:
            raw = base64.b64decode(data.get("content") or "")
        except binascii.Error as e:
            raise RemoteError(f"Could not decode {path} from {url}: {e}") from e
        return raw.decode("utf-8", errors="replace")

    def list_hooks(self, owner: str, repo: str) -> AsyncIterator[dict[str, Any]]:
        return self.paginate(
            f"/repos/{owner}/{repo}/hooks", context={"owner": owner, "repo": repo}
        )

    async def create_hook(
        self, owner: str, repo: str, hook: dict[str, Any]
    ) -> dict[str, Any]:
        response = await self.request(
            "post",
            f"/repos/{owner}/{repo}/hooks",
            json=hook,
            context={"owner": owner, "repo": repo},
        )
        return response.json()

    async def list_required_status_check_contexts(
        self, owner: str, repo: str, branch: str
    ) -> list[str]:
        response = await self.request(
            "get",
            f"{self._protection_path(owner, repo, branch)}/required_status_checks/contexts",
            context={"owner": owner, "repo": repo, "branch": branch},
        )
        return response.json()

    async def get_branch_protection(
        self, owner: str, repo: str, branch: str
    ) -> dict[str, Any]:
        response = await self.request(
            "get",
            self._protection_path(owner, repo, branch),
            context={"owner": owner, "repo": repo, "branch": branch},
        )
        return response.json()

    async def update_branch_protection(
        self, owner: str, repo: str, branch: str, protection: dict[str, Any]
    ) -> dict[str, Any]:
        response = await self.request(
            "put",
            self._protection_path(owner, repo, branch),
            json=protection,
            context={"owner": owner, "repo": repo, "branch": branch},
        )
        return response.json()
