"""
Authorization utilities for the Products service.

Mutations are guarded by a single shared admin key sent in a request header.
Reads are public.
"""
import hmac
import logging
from typing import Any, Mapping, Optional
from strawberry.permission import BasePermission
from strawberry.types import Info

from .config import ADMIN_KEY_HEADER
from .exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


class AdminKeyGuard:
    """
    Compares a request's admin key header with the configured secret.

    Args:
        expected_key: The configured secret. An empty value rejects everything.
        header_name: Header carrying the key, matched case-insensitively
    """

    def __init__(self, expected_key: str, header_name: str = ADMIN_KEY_HEADER):
        self.expected_key = expected_key or ""
        self.header_name = header_name.lower()

    def _supplied_key(self, headers: Mapping[str, str]) -> Optional[str]:
        for name, value in headers.items():
            if name.lower() == self.header_name:
                return value
        return None

    def is_authorized(self, headers: Mapping[str, str]) -> bool:
        if not self.expected_key:
            return False
        supplied = self._supplied_key(headers)
        if not supplied:
            return False
        return hmac.compare_digest(supplied.encode("utf-8"), self.expected_key.encode("utf-8"))

    def check(self, headers: Mapping[str, str]) -> None:
        """
        Raise unless the headers carry the configured admin key.

        Raises:
            UnauthorizedError: If the key is missing, empty or wrong, or if no
                key is configured
        """
        if not self.is_authorized(headers):
            logger.warning("Rejected mutation: invalid or missing admin key")
            raise UnauthorizedError()


class IsAdmin(BasePermission):
    """
    Strawberry permission running the context's ``AdminKeyGuard``.

    Evaluated before the resolver is called, so a rejected request never
    reaches the database.
    """
    message = "Invalid or missing admin key"
    error_extensions = {"code": UnauthorizedError.code}

    def has_permission(self, source: Any, info: Info, **kwargs) -> bool:
        guard: AdminKeyGuard = info.context["admin_guard"]
        request = info.context["request"]
        try:
            guard.check(request.headers)
        except UnauthorizedError:
            return False
        return True
