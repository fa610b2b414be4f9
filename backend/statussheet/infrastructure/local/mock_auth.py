"""
Mock authentication provider for local development.

The bearer token itself names the user: a seeded user id, an e-mail
address, or any other string that becomes an ad-hoc user.
"""

from statussheet.interfaces.auth_provider import IAuthProvider, User

DEV_USER = User(id="dev_user", email="dev@example.com", display_name="Developer")

SEEDED_USERS = {
    DEV_USER.id: DEV_USER,
    "pmo_admin": User(id="pmo_admin", email="pmo@example.com", display_name="PMO Admin"),
}


class MockAuthProvider(IAuthProvider):
    """Resolves bearer tokens to local users without any signature check."""

    def __init__(self, enabled: bool = False):
        self._enabled = enabled

    async def verify_token(self, token: str) -> User:
        if token in SEEDED_USERS:
            return SEEDED_USERS[token]
        email = token if "@" in token else f"{token}@example.com"
        return User(id=token, email=email, display_name=token)

    def is_enabled(self) -> bool:
        return self._enabled
