"""GitHub host client speaking the REST v3 API."""

from __future__ import annotations

import base64
import json
import logging
import os
from typing import Any, Callable, Dict, Optional, Sequence
from urllib.parse import quote

from ..results import RefactoringResult
from .base import BranchExistsError, HostClient, HostTransportError, PullRequestRef

__all__ = ["GitHubHost", "Transport"]

LOGGER = logging.getLogger(__name__)

Transport = Callable[[str, str, Optional[Dict[str, Any]]], Any]


class GitHubHost(HostClient):
    """Create branches, commit file contents, and open pull requests on GitHub.

    Requests go through ``transport(method, path, payload)`` which returns the
    decoded JSON response.  The default transport uses ``urllib``; tests inject
    a callable instead.
    """

    name = "github"

    def __init__(
        self,
        *,
        repository: Optional[str] = None,
        token: Optional[str] = None,
        base_branch: Optional[str] = None,
        api_url: str = "https://api.github.com",
        transport: Optional[Transport] = None,
        timeout: float = 30.0,
    ) -> None:
        self._repository = (repository or os.getenv("GITHUB_REPOSITORY") or "").strip()
        if self._repository.count("/") != 1:
            raise ValueError("A repository in 'owner/name' form is required.")
        self._token = token or os.getenv("GITHUB_TOKEN")
        self._base_branch = base_branch
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport or self._http_transport

        if transport is None and not self._token:
            raise ValueError("A GitHub token is required when using the default transport.")

    @property
    def repository(self) -> str:
        return self._repository

    # ------------------------------------------------------------- operations
    def base_branch(self) -> str:
        """Return the configured base branch, falling back to the repository default."""

        if not self._base_branch:
            data = self._request("GET", self._repo_path(""))
            self._base_branch = str(data["default_branch"])
        return self._base_branch

    def create_branch(self, branch: str) -> None:
        base = self.base_branch()
        ref = self._request("GET", self._repo_path(f"/git/ref/heads/{quote(base, safe='/')}"))
        sha = ref["object"]["sha"]
        try:
            self._request(
                "POST",
                self._repo_path("/git/refs"),
                {"ref": f"refs/heads/{branch}", "sha": sha},
            )
        except HostTransportError as error:
            if error.status == 422:
                raise BranchExistsError(f"Branch already exists: {branch}") from error
            raise
        LOGGER.debug("Created branch %s from %s@%s", branch, base, sha[:7])

    def apply_changes(
        self,
        branch: str,
        results: Sequence[RefactoringResult],
        *,
        message: str,
    ) -> None:
        for result in results:
            path = self._repo_path(f"/contents/{quote(result.file_path, safe='/')}")
            payload: Dict[str, Any] = {
                "message": f"{message}\n\n{result.description}".strip(),
                "content": base64.b64encode(result.refactored_content.encode("utf-8")).decode("ascii"),
                "branch": branch,
            }
            existing_sha = self._blob_sha(path, branch)
            if existing_sha:
                payload["sha"] = existing_sha
            self._request("PUT", path, payload)
            LOGGER.debug("Committed %s to %s", result.file_path, branch)

    def open_pull_request(self, branch: str, title: str, body: str) -> PullRequestRef:
        data = self._request(
            "POST",
            self._repo_path("/pulls"),
            {"title": title, "body": body, "head": branch, "base": self.base_branch()},
        )
        return PullRequestRef(
            branch=branch,
            title=title,
            number=data.get("number"),
            url=data.get("html_url"),
        )

    # ---------------------------------------------------------------- helpers
    def _repo_path(self, suffix: str) -> str:
        return f"/repos/{self._repository}{suffix}"

    def _blob_sha(self, contents_path: str, branch: str) -> Optional[str]:
        """Return the blob SHA of an existing file on ``branch`` or ``None`` for new files."""

        try:
            data = self._request("GET", f"{contents_path}?ref={quote(branch, safe='')}")
        except HostTransportError as error:
            if error.status == 404:
                return None
            raise
        if isinstance(data, dict):
            sha = data.get("sha")
            return str(sha) if sha else None
        return None

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        try:
            return self._transport(method, path, payload)
        except HostTransportError:
            raise
        except Exception as error:  # pragma: no cover - defensive path
            raise HostTransportError(f"Transport rejected the request: {error}") from error

    def _http_transport(self, method: str, path: str, payload: Optional[Dict[str, Any]]) -> Any:
        """Default HTTP transport that targets the GitHub REST API."""
        import urllib.error
        import urllib.request

        data = json.dumps(payload).encode("utf-8") if payload is not None else None
        request = urllib.request.Request(
            f"{self._api_url}{path}",
            data=data,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {self._token}",
                "Content-Type": "application/json",
                "User-Agent": "ai-refactoring-agent/0.1",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            method=method,
        )

        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                raw = response.read()
        except TimeoutError as error:  # pragma: no cover - network-dependent
            raise HostTransportError(f"{method} {path} timed out.") from error
        except urllib.error.HTTPError as error:  # pragma: no cover - network-dependent
            message = error.read().decode("utf-8", errors="ignore")
            raise HostTransportError(f"HTTP {error.code}: {message}", status=error.code) from error
        except urllib.error.URLError as error:  # pragma: no cover - network-dependent
            raise HostTransportError(f"Failed to reach GitHub: {error.reason}") from error

        if not raw:
            return {}
        return json.loads(raw.decode("utf-8"))
