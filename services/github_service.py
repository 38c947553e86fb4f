"""Repository search proxied to the GitHub REST API, with local filtering and sorting."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
from flask import current_app

from models.schemas.github import SORT_ASC
from services.exceptions import GithubRateLimitExceeded, GithubSearchFailed, GithubUnavailable

logger = logging.getLogger(__name__)

GITHUB_HEADERS = {
    "Accept": "application/vnd.github.v3+json",
    "User-Agent": "GitHub-Search-API",
}


def _build_client() -> httpx.Client:
    return httpx.Client(
        base_url=current_app.config["GITHUB_API_URL"],
        headers=GITHUB_HEADERS,
        timeout=current_app.config["GITHUB_TIMEOUT_SECONDS"],
    )


def _fetch(query: str) -> Dict[str, Any]:
    params = {"q": query, "per_page": current_app.config["GITHUB_PER_PAGE"]}
    try:
        with _build_client() as client:
            response = client.get("/search/repositories", params=params)
    except httpx.HTTPError as exc:
        logger.error("GitHub request failed: %s", exc)
        raise GithubSearchFailed() from exc

    if response.status_code >= 400:
        logger.error("GitHub API error: %s %s", response.status_code, response.reason_phrase)
        if response.status_code == 403:
            raise GithubRateLimitExceeded()
        raise GithubUnavailable()

    try:
        return response.json()
    except ValueError as exc:
        logger.error("GitHub returned a non-JSON body")
        raise GithubSearchFailed() from exc


def filter_repositories(items: List[Dict[str, Any]], ignore: Optional[str]) -> List[Dict[str, Any]]:
    """Drop repositories whose name contains ignore (case-insensitive)."""
    if not ignore:
        return list(items)
    needle = ignore.lower()
    return [repo for repo in items if needle not in (repo.get("name") or "").lower()]


def sort_repositories(items: List[Dict[str, Any]], order: Optional[str]) -> List[Dict[str, Any]]:
    if not order:
        return items
    return sorted(items, key=lambda repo: (repo.get("name") or "").lower(), reverse=order != SORT_ASC)


def search_repositories(query: str, sort: Optional[str] = None, ignore: Optional[str] = None) -> Dict[str, Any]:
    logger.info("Searching GitHub repositories with query: %s", query)
    data = _fetch(query)

    items = data.get("items") or []
    kept = filter_repositories(items, ignore)
    if ignore:
        logger.info("Filtered %d repositories containing %r", len(items) - len(kept), ignore)

    kept = sort_repositories(kept, sort)
    if sort:
        logger.info("Sorted repositories in %s order", sort)

    return {
        "total_count": len(kept),
        "incomplete_results": bool(data.get("incomplete_results", False)),
        "items": kept,
    }
