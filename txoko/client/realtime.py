"""Per-session Socket.IO connection for client tools.

At most one live connection exists per ``RealtimeChannel``. On every
``connect`` event the channel marks itself live and joins the member's
personal room (``join-user-room``); chat rooms are joined/left on demand and
such calls are dropped while no connection is live.
"""

from __future__ import annotations

import inspect
import logging
import os
from collections import defaultdict
from collections.abc import Callable
from typing import Any

import socketio
from socketio.exceptions import ConnectionError as SocketConnectionError

from .session import AuthSession
from .storage import TOKEN_KEY

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"

Handler = Callable[..., Any]
LivenessListener = Callable[[bool], None]


def default_api_url() -> str:
    return os.environ.get("TXOKO_API_URL") or DEFAULT_API_URL


class RealtimeChannel:
    def __init__(
        self,
        session: AuthSession,
        url: str | None = None,
        *,
        client_factory: Callable[[], Any] = socketio.AsyncClient,
        socketio_path: str = "socket.io",
    ):
        self.session = session
        self.url = url or default_api_url()
        self.socketio_path = socketio_path
        self._client_factory = client_factory
        self._client: Any | None = None
        self._user_id: int | None = None
        self._connected = False
        self._handlers: dict[str, list[Handler]] = defaultdict(list)
        self._liveness_listeners: list[LivenessListener] = []

    async def __aenter__(self) -> RealtimeChannel:
        await self.open()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def client(self) -> Any | None:
        return self._client

    def add_liveness_listener(self, listener: LivenessListener) -> Callable[[], None]:
        self._liveness_listeners.append(listener)

        def remove() -> None:
            if listener in self._liveness_listeners:
                self._liveness_listeners.remove(listener)

        return remove

    def _set_connected(self, value: bool) -> None:
        if self._connected == value:
            return
        self._connected = value
        for listener in list(self._liveness_listeners):
            listener(value)

    def on(self, event: str, handler: Handler) -> None:
        """Register an inbound event handler for current and future connections."""
        first = not self._handlers[event]
        self._handlers[event].append(handler)
        if first and self._client is not None:
            self._client.on(event, self._dispatcher(self._client, event))

    def _dispatcher(self, client: Any, event: str) -> Handler:
        async def dispatch(*args: Any) -> None:
            if client is not self._client:
                return
            for handler in list(self._handlers[event]):
                result = handler(*args)
                if inspect.isawaitable(result):
                    await result

        return dispatch

    def _bind(self, client: Any, user_id: int) -> None:
        async def on_connect(*_args: Any) -> None:
            if client is not self._client:
                return
            logger.info("Connected to realtime server %s", self.url)
            self._set_connected(True)
            await client.emit("join-user-room", user_id)

        async def on_disconnect(*_args: Any) -> None:
            if client is not self._client:
                return
            logger.info("Disconnected from realtime server")
            self._set_connected(False)

        client.on("connect", on_connect)
        client.on("disconnect", on_disconnect)
        for event in list(self._handlers):
            client.on(event, self._dispatcher(client, event))

    async def open(self) -> None:
        """Connect when signed in; no-op while a connection exists."""
        if self._client is not None or not self.session.is_authenticated:
            return
        user_id = self.session.user_id
        token = self.session.store.get(TOKEN_KEY)
        client = self._client_factory()
        self._client = client
        self._user_id = user_id
        self._bind(client, user_id)
        try:
            await client.connect(
                self.url,
                auth={"token": token},
                socketio_path=self.socketio_path,
            )
        except SocketConnectionError as exc:
            logger.warning("Realtime connection to %s failed: %s", self.url, exc)
            if self._client is client:
                self._client = None
                self._user_id = None
            self._set_connected(False)

    async def close(self) -> None:
        client, self._client = self._client, None
        self._user_id = None
        if client is not None:
            await client.disconnect()
        self._set_connected(False)

    async def sync(self) -> None:
        """Reconcile the connection with the session after it changed."""
        if not self.session.is_authenticated:
            await self.close()
            return
        if self._client is not None and self._user_id != self.session.user_id:
            await self.close()
        await self.open()

    async def join_room(self, room_id: str) -> None:
        if self._client is None or not self._connected:
            return
        await self._client.emit("join-chat-room", room_id)

    async def leave_room(self, room_id: str) -> None:
        if self._client is None or not self._connected:
            return
        await self._client.emit("leave-chat-room", room_id)
