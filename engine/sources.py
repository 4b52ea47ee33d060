# Copyright (c) 2026 Nenad Vasic. All rights reserved.
# Licensed under the Business Source License 1.1 (BSL-1.1)
# See LICENSE file in the project root for full license text.

"""
Reflection sources — where history comes from.

The engine only needs two calls:
    await source.fetch_reflections(user_id, limit)     -> list of raw rows, newest first
    await source.fetch_precomputed_journey(user_id)    -> PrecomputedJourney or None

Failures surface as ReflectionFetchError; the service decides what to do.

Implementations:
  - JsonlReflectionSource: local files under the data dir
  - HttpReflectionSource: a reflection API over HTTP (aiohttp)
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import aiohttp
from pydantic import ValidationError

from core.paths import get_paths
from engine.schemas import (
    PrecomputedJourney,
    ReflectionFetchError,
    load_jsonl,
    load_validated,
)

logger = logging.getLogger("journey.sources")


class ReflectionSource:
    """Interface for reflection stores."""

    async def fetch_reflections(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        raise NotImplementedError

    async def fetch_precomputed_journey(self, user_id: str) -> Optional[PrecomputedJourney]:
        return None

    async def close(self) -> None:
        pass


def _sort_key(row: Dict[str, Any]) -> str:
    value = row.get("created_at") or row.get("createdAt") or ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


class JsonlReflectionSource(ReflectionSource):
    """
    Reads ~/.journey/journey-reflections/{user_id}.jsonl and
    ~/.journey/journey-precomputed/{user_id}.json.
    """

    async def fetch_reflections(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        path = get_paths().reflections_file(user_id)
        try:
            rows = load_jsonl(path)
        except OSError as e:
            raise ReflectionFetchError(f"cannot read {path}: {e}") from e
        rows = [r for r in rows if isinstance(r, dict)]
        rows.sort(key=_sort_key, reverse=True)
        return rows[:limit]

    async def fetch_precomputed_journey(self, user_id: str) -> Optional[PrecomputedJourney]:
        path = get_paths().precomputed_file(user_id)
        if not path.exists():
            return None
        journey = load_validated(path, PrecomputedJourney)
        return journey if journey.recent_reflection_count > 0 else None


class HttpReflectionSource(ReflectionSource):
    """
    Reflection API client.

    Endpoints (relative to base_url):
        GET /users/{user_id}/reflections?limit=N   -> [row, ...]
        GET /users/{user_id}/journey               -> summary | 404
    """

    def __init__(self, base_url: str, token: Optional[str] = None, timeout: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: Optional[aiohttp.ClientSession] = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(headers=self._headers, timeout=self._timeout)
        return self._session

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with self._get_session().get(url, params=params) as response:
                if response.status == 404:
                    return None
                if response.status != 200:
                    raise ReflectionFetchError(f"GET {path} returned {response.status}")
                return await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ReflectionFetchError(f"GET {path} failed: {e}") from e

    async def fetch_reflections(self, user_id: str, limit: int) -> List[Dict[str, Any]]:
        data = await self._get_json(f"/users/{user_id}/reflections", {"limit": limit})
        if data is None:
            return []
        if not isinstance(data, list):
            raise ReflectionFetchError("reflections payload is not a list")
        return data

    async def fetch_precomputed_journey(self, user_id: str) -> Optional[PrecomputedJourney]:
        data = await self._get_json(f"/users/{user_id}/journey")
        if not data:
            return None
        try:
            return PrecomputedJourney.model_validate(data)
        except ValidationError as e:
            logger.warning("Ignoring invalid journey summary for %s: %s", user_id, e)
            return None

    async def close(self) -> None:
        if self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
