"""Minimal GitHub REST client for identity checks and repository management."""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

import requests
from pydantic import BaseModel, ValidationError as PydanticValidationError

from commit_canvas.config import DEFAULT_API_BASE_URL, DEFAULT_WEB_BASE_URL
from commit_canvas.errors import RemoteApiError, RemoteAuthError
from commit_canvas.logging import get_logger
from commit_canvas.models import GitHubRepo, GitHubUser

logger = get_logger("github")

REPO_SCOPES = ("repo", "public_repo")
REPO_DESCRIPTION = "Generated with commit-canvas"

ModelT = TypeVar("ModelT", bound=BaseModel)


class GitHubClient:
    """Bearer-token session against the GitHub REST API."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_BASE_URL,
        timeout: float = 15.0,
        session: requests.Session | None = None,
    ):
        if not token:
            raise RemoteAuthError("Missing GitHub token (set GITHUB_TOKEN or .api_keys/GitHub.md)")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": "commit-canvas",
            }
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = path if path.startswith("http") else f"{self.base_url}{path}"
        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as exc:
            raise RemoteApiError(f"{method} {path} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: requests.Response, context: str, expected: int = 200) -> None:
        if response.status_code == expected:
            return
        body = response.text[:500]
        if response.status_code == 401:
            raise RemoteAuthError(f"{context}: token invalid or expired", status_code=401)
        logger.error("%s returned %d: %s", context, response.status_code, body)
        raise RemoteApiError(f"{context} returned {response.status_code}: {body}", status_code=response.status_code)

    @staticmethod
    def _json(response: requests.Response, context: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteApiError(f"{context} returned a non-JSON body", status_code=response.status_code) from exc

    @staticmethod
    def _parse(model: type[ModelT], payload: Any, context: str) -> ModelT:
        try:
            return model.model_validate(payload)
        except PydanticValidationError as exc:
            raise RemoteApiError(f"{context} returned an unexpected payload: {exc}") from exc

    def _paginate(self, path: str, context: str) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        next_url: str | None = path
        while next_url:
            response = self._request("GET", next_url)
            self._raise_for_status(response, context)
            batch = self._json(response, context)
            if isinstance(batch, list):
                items.extend(batch)
            else:
                items.append(batch)
            next_url = response.links.get("next", {}).get("url")
        return items

    def get_user(self) -> GitHubUser:
        response = self._request("GET", "/user")
        self._raise_for_status(response, "GET /user")
        return self._parse(GitHubUser, self._json(response, "GET /user"), "GET /user")

    def verify_token(self) -> GitHubUser:
        """Check the credential and its repository scope before any mutation."""
        response = self._request("GET", "/user")
        if response.status_code == 401:
            raise RemoteAuthError("Token invalid or expired", status_code=401)
        if response.status_code == 403:
            raise RemoteAuthError("Token lacks permission", status_code=403)
        self._raise_for_status(response, "GET /user")

        # Fine-grained tokens do not report scopes; classic OAuth tokens do.
        scopes_header = response.headers.get("X-OAuth-Scopes")
        if scopes_header is not None:
            scopes = {scope.strip() for scope in scopes_header.split(",") if scope.strip()}
            logger.info("token scopes: %s", ", ".join(sorted(scopes)) or "(none)")
            if not scopes.intersection(REPO_SCOPES):
                raise RemoteAuthError("Token is missing the 'repo' scope required to push", status_code=403)

        return self._parse(GitHubUser, self._json(response, "GET /user"), "GET /user")

    def create_repository(self, name: str, private: bool = False, description: str = REPO_DESCRIPTION) -> GitHubRepo:
        payload = {"name": name, "description": description, "private": private, "auto_init": False}
        logger.info("creating repository %s (private=%s)", name, private)
        response = self._request("POST", "/user/repos", json=payload)
        self._raise_for_status(response, "POST /user/repos", expected=201)
        return self._parse(GitHubRepo, self._json(response, "POST /user/repos"), "POST /user/repos")

    def list_repositories(self) -> list[GitHubRepo]:
        items = self._paginate("/user/repos?per_page=100", "GET /user/repos")
        return [self._parse(GitHubRepo, item, "GET /user/repos") for item in items]

    def list_branches(self, owner: str, repo: str) -> list[str]:
        path = f"/repos/{quote(owner)}/{quote(repo)}/branches?per_page=100"
        items = self._paginate(path, f"GET /repos/{owner}/{repo}/branches")
        return [str(item["name"]) for item in items if isinstance(item, dict) and "name" in item]


def split_repo_name(name: str, login: str) -> tuple[str, str]:
    """Return ``(owner, repo)`` for ``owner/repo`` or a bare name under ``login``."""
    name = name.strip().strip("/")
    if name.endswith(".git"):
        name = name[:-4]
    if "/" in name:
        owner, repo = name.split("/", 1)
        return owner, repo
    return login, name


def repository_url(name: str, login: str, web_base_url: str = DEFAULT_WEB_BASE_URL) -> str:
    owner, repo = split_repo_name(name, login)
    return f"{web_base_url.rstrip('/')}/{owner}/{repo}"


def push_url(name: str, login: str, token: str, web_base_url: str = DEFAULT_WEB_BASE_URL) -> str:
    """HTTPS remote with the token embedded for non-interactive pushes. Never log this."""
    owner, repo = split_repo_name(name, login)
    scheme, _, host = web_base_url.rstrip("/").partition("://")
    return f"{scheme}://{quote(token, safe='')}@{host}/{owner}/{repo}.git"
