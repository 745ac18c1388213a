"""
Access guard for the protected stats endpoint.
"""
import secrets
from typing import Optional

from forecast_api.models.weather import Credential


class AccessGuard:
    """
    Compare a presented credential against one expected username/password.
    """

    def __init__(self, expected: Credential):
        """
        Args:
            expected: The only credential that is granted access

        Raises:
            ValueError: If the expected username is empty
        """
        if not expected.username:
            raise ValueError("Access guard requires a non-empty username")
        self.expected = expected

    def authorize(self, credential: Optional[Credential]) -> bool:
        """Return True only for an exact match of the expected pair."""
        if credential is None or not credential.username:
            return False

        username_ok = secrets.compare_digest(
            credential.username.encode("utf-8"), self.expected.username.encode("utf-8")
        )
        password_ok = secrets.compare_digest(
            credential.password.encode("utf-8"), self.expected.password.encode("utf-8")
        )
        return username_ok and password_ok
