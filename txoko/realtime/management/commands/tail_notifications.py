from __future__ import annotations

import asyncio
import json

from django.conf import settings
from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from txoko.client.errors import ErrorDisplay
from txoko.client.errors import FetchError
from txoko.client.http import ApiClient
from txoko.client.realtime import RealtimeChannel
from txoko.client.session import AuthSession
from txoko.client.storage import TokenStore


class Command(BaseCommand):
    help = "Print your recent notifications, then stream realtime events"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--api-url",
            default=settings.TXOKO_API_URL,
            help="Server origin (default: TXOKO_API_URL)",
        )
        parser.add_argument("--email", help="Sign in with this email first")
        parser.add_argument("--password", help="Password for --email")
        parser.add_argument("--society", help="Society id for --email")
        parser.add_argument("--lang", default=None, help="eu or es")
        parser.add_argument(
            "--duration",
            type=float,
            default=0,
            help="Seconds to stream for; 0 streams until interrupted",
        )
        parser.add_argument(
            "--no-stream",
            action="store_true",
            help="Only print recent notifications",
        )

    def handle(self, *args, **options) -> None:
        store = TokenStore(settings.TXOKO_STORAGE_PATH or None)
        api_url = options["api_url"].rstrip("/")
        client = ApiClient(f"{api_url}/api/v1", store)
        session = AuthSession(store)

        try:
            self._sign_in(session, client, options)
            recent = client.get("notifications/recent/", lang=options["lang"])
        except FetchError as exc:
            display = ErrorDisplay(exc)
            self.stderr.write(self.style.ERROR(display.render()))
            raise CommandError(display.message) from exc

        if not recent:
            self.stdout.write("No notifications.")
        for item in recent:
            self._print_notification(item)

        if options["no_stream"]:
            return
        try:
            asyncio.run(self._stream(session, api_url, options["duration"]))
        except KeyboardInterrupt:
            self.stdout.write("Stopped.")

    def _sign_in(self, session: AuthSession, client: ApiClient, options) -> None:
        if options["email"]:
            if not options["password"] or not options["society"]:
                msg = "--password and --society are required with --email"
                raise CommandError(msg)
            session.login(
                client, options["email"], options["password"], options["society"]
            )
        else:
            session.restore(client)
        if not session.is_authenticated:
            msg = "Not signed in: pass --email/--password/--society"
            raise CommandError(msg)

    def _print_notification(self, item: dict) -> None:
        marker = " " if item.get("isRead") else "*"
        self.stdout.write(f"{marker} [{item.get('type')}] {item.get('title')}")
        if item.get("message"):
            self.stdout.write(f"    {item['message']}")

    async def _stream(self, session: AuthSession, api_url: str, duration: float):
        channel = RealtimeChannel(session, api_url)
        channel.add_liveness_listener(
            lambda live: self.stdout.write("connected" if live else "disconnected")
        )
        channel.on("notification", self._print_notification)
        channel.on(
            "new-message-notification",
            lambda payload: self.stdout.write(f"message: {json.dumps(payload)}"),
        )
        async with channel:
            if duration > 0:
                await asyncio.sleep(duration)
            else:
                await asyncio.Event().wait()
