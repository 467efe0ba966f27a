"""Global Socket.IO server for the frontend.

This is intentionally domain-agnostic: notifications and chat share the same
Socket.IO server instance, and future features should too.

Frontend convention:
- URL base: the API origin (``VITE_API_URL``)
- Socket.IO path: /socket.io/
- Auth: ``auth.token`` (JWT access token), ``query.token`` accepted too

Rooms:
- ``user-<user id>``: personal notification room, joined by the client with
  ``join-user-room`` after connecting
- ``room-<chat room id>``: chat room, joined/left on demand
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import AccessToken
from socketio.exceptions import ConnectionRefusedError as ConnectionRefused

logger = logging.getLogger(__name__)


def _client_manager() -> socketio.AsyncManager | None:
    url = getattr(settings, "SOCKETIO_REDIS_URL", "")
    if not url:
        return None
    return socketio.AsyncRedisManager(url)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins=getattr(settings, "SOCKETIO_CORS_ALLOWED_ORIGINS", "*"),
    client_manager=_client_manager(),
    logger=False,
    engineio_logger=False,
)


@dataclass(frozen=True)
class UserRealtimeContext:
    user_id: int
    society_id: int | None


def room_for_user(user_id: int | str) -> str:
    return f"user-{user_id}"


def room_for_chat(room_id: str) -> str:
    return f"room-{room_id}"


@database_sync_to_async
def _get_user_context_from_access_token(token: str) -> UserRealtimeContext:
    # AccessToken raises TokenError directly, keeping "expired" distinguishable.
    validated = AccessToken(token)
    user = JWTAuthentication().get_user(validated)
    society_id = getattr(user, "society_id", None)
    return UserRealtimeContext(
        user_id=int(user.id),
        society_id=int(society_id) if society_id else None,
    )


@database_sync_to_async
def _is_chat_participant(room_id: str, user_id: int) -> bool:
    from txoko.chat.models import ChatRoom  # noqa: PLC0415

    return ChatRoom.objects.for_participant(user_id).filter(pk=room_id).exists()


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO auth payload or query string.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token
    return None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if not token:
        msg = "unauthorized"
        raise ConnectionRefused(msg)

    try:
        ctx = await _get_user_context_from_access_token(token)
    except TokenError as exc:
        message = str(exc)
        # Frontend expects this exact string to trigger refresh.
        if "expired" in message.lower():
            msg = "jwt_expired"
            raise ConnectionRefused(msg) from exc
        msg = "unauthorized"
        raise ConnectionRefused(msg) from exc
    except AuthenticationFailed as exc:  # user not found / inactive, etc.
        msg = "unauthorized"
        raise ConnectionRefused(msg) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise ConnectionRefused(msg) from exc

    await sio.save_session(
        sid,
        {"user_id": ctx.user_id, "society_id": ctx.society_id},
    )
    logger.info("User %s connected to socket %s", ctx.user_id, sid)


async def _session_user_id(sid: str) -> int | None:
    session = await sio.get_session(sid)
    return session.get("user_id") if isinstance(session, dict) else None


@sio.on("join-user-room")
async def join_user_room(sid: str, user_id: Any):
    session_user_id = await _session_user_id(sid)
    if session_user_id is None or str(user_id) != str(session_user_id):
        logger.warning(
            "Socket %s (user %s) tried to join room of user %s",
            sid,
            session_user_id,
            user_id,
        )
        return
    await sio.enter_room(sid, room_for_user(session_user_id))
    logger.info("User %s joined their room", session_user_id)


@sio.on("join-chat-room")
async def join_chat_room(sid: str, room_id: Any):
    user_id = await _session_user_id(sid)
    if user_id is None or not room_id:
        return
    try:
        room_id = uuid.UUID(str(room_id))
    except ValueError:
        logger.warning("User %s sent malformed chat room id %r", user_id, room_id)
        return
    if not await _is_chat_participant(str(room_id), user_id):
        logger.warning("User %s is not a participant of chat room %s", user_id, room_id)
        return
    await sio.enter_room(sid, room_for_chat(str(room_id)))
    logger.info("User %s joined chat room %s", user_id, room_id)


@sio.on("leave-chat-room")
async def leave_chat_room(sid: str, room_id: Any):
    if not room_id:
        return
    await sio.leave_room(sid, room_for_chat(str(room_id)))
    logger.info("Socket %s left chat room %s", sid, room_id)


@sio.event
async def disconnect(sid: str, *args):
    # Rooms/session are cleaned up automatically.
    logger.info("Socket %s disconnected", sid)


def emit_event_to_room(
    room: str,
    event: str,
    payload: dict[str, Any],
    *,
    skip_sid: str | list[str] | None = None,
) -> None:
    """Emit an event to a room from sync Django code."""

    async_to_sync(sio.emit)(event, payload, room=room, skip_sid=skip_sid)


def emit_to_user(user_id: int | str, event: str, payload: dict[str, Any]) -> None:
    emit_event_to_room(room_for_user(user_id), event, payload)


def emit_to_room(room_id: str, event: str, payload: dict[str, Any]) -> None:
    emit_event_to_room(room_for_chat(room_id), event, payload)


def emit_to_room_excluding_user(
    room_id: str,
    exclude_user_id: int | str,
    event: str,
    payload: dict[str, Any],
) -> None:
    """Emit to a chat room, skipping every socket of ``exclude_user_id``."""

    async def _emit() -> None:
        skip = [
            sid
            for sid, _eio_sid in sio.manager.get_participants(
                "/", room_for_user(exclude_user_id)
            )
        ]
        await sio.emit(event, payload, room=room_for_chat(room_id), skip_sid=skip)

    async_to_sync(_emit)()


def emit_to_all(event: str, payload: dict[str, Any]) -> None:
    async_to_sync(sio.emit)(event, payload)
