"""
Read-only GitHub client used by the profile routes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import requests

REQUEST_TIMEOUT = 10  # seconds
REPO_PAGE_SIZE = 10


class GithubClient(Protocol):
    def list_repos(self, username: str) -> Optional[list[dict]]:
        ...


@dataclass
class RestGithubClient:
    """
    Calls the public GitHub REST API.

    ``list_repos`` returns None when GitHub answers with anything but 200;
    network failures surface as ``requests.RequestException``.
    """

    api_url: str = "https://api.github.com"
    client_id: Optional[str] = None
    client_secret: Optional[str] = None

    def list_repos(self, username: str) -> Optional[list[dict]]:
        params = {"per_page": REPO_PAGE_SIZE, "sort": "created:asc"}
        auth = None
        if self.client_id and self.client_secret:
            auth = (self.client_id, self.client_secret)
        response = requests.get(
            f"{self.api_url.rstrip('/')}/users/{username}/repos",
            params=params,
            auth=auth,
            headers={
                "User-Agent": "devconnector",
                "Accept": "application/vnd.github+json",
            },
            timeout=REQUEST_TIMEOUT,
        )
        if response.status_code != 200:
            return None
        return response.json()
