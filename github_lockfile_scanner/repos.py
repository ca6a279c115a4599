"""List every repository in a GitHub organization."""

import json
from urllib.parse import quote

from . import console
from .client import GitHubApiError, GitHubClient
from .models import PER_PAGE


def _repo_names(body: str, url: str) -> list[str]:
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise GitHubApiError(f"Malformed JSON from {url}: {e}", url=url) from e
    if not isinstance(data, list):
        raise GitHubApiError(f"Expected a list of repositories from {url}", url=url)
    return [item["name"] for item in data if isinstance(item, dict) and item.get("name")]


def list_org_repos(client: GitHubClient, org: str) -> list[str]:
    """Fetch all repository names for an org, following Link rel="next".

    Pages are requested in order starting at 1. The loop ends on the first page
    whose Link header has no "next" relation; there is no page cap.
    """
    url = f"{client.api_url}/orgs/{quote(org, safe='')}/repos"
    repos: list[str] = []
    page = 1

    while True:
        console.info(f"-> Fetching page {page} of repositories for org {org}...")
        resp = client.get(url, params={"type": "all", "per_page": PER_PAGE, "page": page})
        repos.extend(_repo_names(resp.body, url))

        if resp.next_link is None:
            break
        page += 1

    return repos
