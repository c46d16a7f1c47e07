"""
Identity and credential collaborators.

The feed never authenticates anyone itself: it asks an IdentityProvider who
is signed in and resolves a bearer token for that user. When no token can be
found the remote API is simply not called.
"""

from typing import Dict, Optional, Protocol
import logging

from pawfeed.schemas.notification import CurrentUser

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    async def get_current_user(self) -> Optional[CurrentUser]: ...


class TokenStore(Protocol):
    async def get_token(self, user_id: str) -> Optional[str]: ...


class StaticIdentityProvider:
    """Identity provider holding the signed-in user in memory."""

    def __init__(self, user: Optional[CurrentUser] = None):
        self._user = user

    async def get_current_user(self) -> Optional[CurrentUser]:
        return self._user

    def sign_in(self, user: CurrentUser) -> None:
        self._user = user
        logger.info(f"Signed in user {user.id}")

    def sign_out(self) -> None:
        self._user = None


class InMemoryTokenStore:
    """Bearer tokens keyed by user id."""

    def __init__(self, tokens: Optional[Dict[str, str]] = None):
        self._tokens: Dict[str, str] = dict(tokens or {})

    async def get_token(self, user_id: str) -> Optional[str]:
        return self._tokens.get(user_id)

    def set_token(self, user_id: str, token: str) -> None:
        self._tokens[user_id] = token

    def remove_token(self, user_id: str) -> None:
        self._tokens.pop(user_id, None)


async def resolve_token(
    user: CurrentUser,
    token_store: Optional[TokenStore] = None,
) -> Optional[str]:
    """
    Find a bearer token for ``user``.

    The token carried on the user wins; otherwise the token store is asked.
    Returns None when neither has one.
    """
    if user.token:
        return user.token
    if token_store is not None:
        token = await token_store.get_token(user.id)
        if token:
            return token
    logger.debug(f"No token available for user {user.id}")
    return None
