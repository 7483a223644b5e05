"""Session creation client using aiohttp — implements SessionPort."""

from typing import Optional, Sequence

import aiohttp

from session_setup.config import ApiConfig, AppConfig
from session_setup.domain.models import ActionId
from session_setup.ports.outbound import SessionCreateResult


class SessionClient:
    """Create a tracked session from selected library action ids."""

    def __init__(self, config: Optional[ApiConfig] = None):
        self._config = config or AppConfig.from_env().api

    def _headers(self) -> dict:
        if self._config.token:
            return {"Authorization": f"Bearer {self._config.token}"}
        return {}

    async def create_session(
        self,
        session_name: Optional[str],
        selected_library_ids: Sequence[ActionId],
    ) -> SessionCreateResult:
        payload = {
            "session_name": session_name or None,
            "selected_action_ids": list(selected_library_ids),
        }
        timeout = aiohttp.ClientTimeout(total=self._config.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self._config.sessions_url, json=payload, headers=self._headers()
                ) as resp:
                    if resp.status >= 400:
                        body = await resp.text()
                        return SessionCreateResult(
                            success=False, error=f"HTTP {resp.status}: {body}"
                        )
                    data = await resp.json()
        except Exception as e:
            return SessionCreateResult(success=False, error=str(e))

        session_id = data.get("session_id") if isinstance(data, dict) else None
        if session_id is None:
            return SessionCreateResult(success=False, error=f"Missing session_id in {data!r}")
        return SessionCreateResult(success=True, session_id=session_id)
