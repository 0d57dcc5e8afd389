from typing import Optional
from urllib.parse import quote

import httpx

from skill_system.errors import PathRequestFailed, TreeUnavailable
from skill_system.models import Tree, validate_tree


class SkillTreeClient:
    """
    Async client for the remote graph service.

    Every failure is turned into TreeUnavailable or PathRequestFailed, so
    callers never see raw httpx or pydantic errors.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        strict: bool = False,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.strict = strict
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self):
        await self._http.aclose()

    def _parse_tree(self, payload) -> Tree:
        tree = Tree.model_validate(payload)
        if self.strict:
            validate_tree(tree)
        return tree

    async def fetch_universal_tree(self) -> Tree:
        """GET {base}/tree"""
        try:
            res = await self._http.get(f"{self.base_url}/tree")
            res.raise_for_status()
            return self._parse_tree(res.json())
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            # ValueError covers bad JSON, ValidationError and MalformedGraph
            raise TreeUnavailable(
                f"There was an error fetching the universal tree: {e}"
            ) from e

    async def fetch_path(self, start_id: str, target_id: str) -> Tree:
        """GET {base}/paths/{start_id}/{target_id}"""
        # Ids are path segments; "/" or "?" inside an id must not change the route
        url = f"{self.base_url}/paths/{quote(start_id, safe='')}/{quote(target_id, safe='')}"
        try:
            res = await self._http.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise PathRequestFailed(f"Failed to fetch path: {e}") from e

        if not res.is_success:
            raise PathRequestFailed(
                f"Failed to fetch path: {res.status_code} {res.reason_phrase}",
                status_code=res.status_code,
            )

        try:
            data = res.json()
            return self._parse_tree({"nodes": data["nodes"], "links": data["links"]})
        except (ValueError, KeyError, TypeError) as e:
            raise PathRequestFailed(f"Failed to read path response: {e}") from e
