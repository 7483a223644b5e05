"""Backend API adapters."""

from session_setup.adapters.api.library_client import ActionLibraryClient
from session_setup.adapters.api.session_client import SessionClient

__all__ = ["ActionLibraryClient", "SessionClient"]
