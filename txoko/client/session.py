"""Signed-in member state shared by every client-side consumer.

An ``AuthSession`` is created once and passed explicitly to whatever needs
it (route checks, the realtime channel, command-line tools). Changes are
broadcast to subscribers synchronously, in subscription order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from dataclasses import replace
from typing import TYPE_CHECKING
from typing import Any

from txoko.users import access

from .storage import TOKEN_KEY
from .storage import TokenStore

if TYPE_CHECKING:  # import for type checking only
    from .http import ApiClient

logger = logging.getLogger(__name__)

Listener = Callable[["AuthSession"], None]


@dataclass(frozen=True)
class SessionUser:
    id: int
    name: str
    email: str
    role: str
    function: str
    society_id: int | None = None
    linked_member_id: int | None = None
    linked_member_name: str | None = None
    phone: str = ""
    iban: str = ""

    # Read by the access helpers, which treat objects without this as present.
    is_authenticated = True

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> SessionUser:
        """Build from the camelCase user body returned by the API."""
        return cls(
            id=int(payload["id"]),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            role=payload.get("role") or "",
            function=payload.get("function") or "",
            society_id=payload.get("societyId"),
            linked_member_id=payload.get("linkedMemberId"),
            linked_member_name=payload.get("linkedMemberName"),
            phone=payload.get("phone") or "",
            iban=payload.get("iban") or "",
        )

    def with_changes(self, **changes: Any) -> SessionUser:
        return replace(self, **changes)


class AuthSession:
    def __init__(self, store: TokenStore | None = None, user: SessionUser | None = None):
        self.store = store or TokenStore()
        self._user = user
        self._listeners: list[Listener] = []

    @property
    def user(self) -> SessionUser | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def user_id(self) -> int | None:
        return self._user.id if self._user is not None else None

    @property
    def token(self) -> str | None:
        return self.store.get(TOKEN_KEY)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def sign_in(self, user: SessionUser, token: str) -> None:
        self.store.set(TOKEN_KEY, token)
        self._user = user
        logger.info("Signed in as user %s", user.id)
        self._notify()

    def update_user(self, user: SessionUser) -> None:
        self._user = user
        self._notify()

    def sign_out(self) -> None:
        self.store.remove(TOKEN_KEY)
        self._user = None
        logger.info("Signed out")
        self._notify()

    def login(
        self,
        client: ApiClient,
        email: str,
        password: str,
        society_id: int | str,
    ) -> SessionUser:
        payload = client.post(
            "auth/login/",
            {"email": email, "password": password, "societyId": society_id},
        )
        user = SessionUser.from_api(payload["user"])
        self.sign_in(user, payload["token"])
        return user

    def restore(self, client: ApiClient) -> SessionUser | None:
        """Re-hydrate the user from a stored token via ``users/me/``."""
        if not self.token:
            return None
        user = SessionUser.from_api(client.get("users/me/"))
        self.update_user(user)
        return user

    # Capability queries over the current snapshot.

    def has_admin_access(self) -> bool:
        return access.has_admin_access(self._user)

    def has_treasurer_access(self) -> bool:
        return access.has_treasurer_access(self._user)

    def has_cellarman_access(self) -> bool:
        return access.has_cellarman_access(self._user)

    def can_post_announcements(self) -> bool:
        return access.can_post_announcements(self._user)

    def has_access(self, level: access.AccessLevel | str | None) -> bool:
        return access.has_access(self._user, level)
