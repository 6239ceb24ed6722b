"""Utility script to send a notification through a running server."""

from __future__ import annotations

import argparse

import httpx

from board_realtime.client import ApiRequestError, NotificationApiClient


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create a notification via the HTTP API so open sessions receive it live.",
    )
    parser.add_argument("user_id", help="Recipient user id")
    parser.add_argument("--title", required=True, help="Notification title")
    parser.add_argument("--message", required=True, help="Notification body")
    parser.add_argument("--type", default="system", help="Notification type (default: system)")
    parser.add_argument("--action-url", default=None, help="Link opened from the notification")
    parser.add_argument(
        "--server",
        default="http://localhost:8000",
        help="Base URL of the API (default: http://localhost:8000)",
    )
    parser.add_argument("--token", required=True, help="Bearer token of the sender")
    return parser.parse_args()


def main() -> None:
    """Send a notification using the provided command line arguments."""

    args = parse_args()
    with httpx.Client(base_url=args.server, timeout=10) as http:
        client = NotificationApiClient(http, args.token)
        try:
            created = client.create(
                user_id=args.user_id,
                type=args.type,
                title=args.title,
                message=args.message,
                action_url=args.action_url,
            )
        except ApiRequestError as exc:
            raise SystemExit(f"Could not send the notification ({exc.code}): {exc.message}") from exc

    print(
        "Notification created:\n"
        f"  ID: {created['id']}\n"
        f"  User: {created['userId']}\n"
        f"  Type: {created['type']}"
    )


if __name__ == "__main__":
    main()
