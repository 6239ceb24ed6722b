"""Utility script to issue an access token for local development."""

from __future__ import annotations

import argparse
from datetime import timedelta

from board_realtime.domain.entities import TokenClaims
from board_realtime.infrastructure.security import issue_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for token creation."""

    parser = argparse.ArgumentParser(
        description="Issue a signed access token accepted by the realtime board API.",
    )
    parser.add_argument("user_id", help="Identifier placed in the token subject")
    parser.add_argument("--email", default=None, help="Email claim (optional)")
    parser.add_argument("--role-id", default=None, help="Role claim (optional)")
    parser.add_argument(
        "--minutes",
        type=int,
        default=None,
        help="Lifetime in minutes (defaults to ACCESS_TOKEN_EXPIRE_MINUTES)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    if not args.user_id.strip():
        raise SystemExit("A non-empty user id is required.")

    expires = timedelta(minutes=args.minutes) if args.minutes else None
    token = issue_token(
        TokenClaims(user_id=args.user_id.strip(), role_id=args.role_id, email=args.email),
        expires_delta=expires,
    )
    print(token)


if __name__ == "__main__":
    main()
