"""Action library client using aiohttp — implements ActionLibraryPort."""

import sys
from typing import Optional

import aiohttp

from session_setup.config import ApiConfig, AppConfig
from session_setup.domain.models import LibraryAction
from session_setup.ports.outbound import LibraryFetchResult


def _log(msg: str):
    print(msg, file=sys.stderr)


class ActionLibraryClient:
    """Fetch the shared action library. Single attempt, no retry."""

    def __init__(self, config: Optional[ApiConfig] = None):
        self._config = config or AppConfig.from_env().api

    def _headers(self) -> dict:
        if self._config.token:
            return {"Authorization": f"Bearer {self._config.token}"}
        return {}

    async def fetch_library(self) -> LibraryFetchResult:
        timeout = aiohttp.ClientTimeout(total=self._config.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(
                    self._config.library_url, headers=self._headers()
                ) as resp:
                    if resp.status >= 400:
                        body = await resp.text()
                        return LibraryFetchResult(
                            success=False, error=f"HTTP {resp.status}: {body}"
                        )
                    data = await resp.json()
        except Exception as e:
            return LibraryFetchResult(success=False, error=str(e))

        if not isinstance(data, list):
            return LibraryFetchResult(
                success=False, error=f"Unexpected library payload: {type(data).__name__}"
            )

        actions = []
        for raw in data:
            try:
                actions.append(LibraryAction.from_dict(raw))
            except (KeyError, TypeError, ValueError) as e:
                _log(f"Skipping malformed library action {raw!r}: {e}")
        return LibraryFetchResult(success=True, actions=actions)
