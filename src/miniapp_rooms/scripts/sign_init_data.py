"""Print a signed launch token for local testing.

Usage: python -m miniapp_rooms.scripts.sign_init_data user_id=42 user_first_name=Ada
"""
from __future__ import annotations

import argparse
import time

from miniapp_rooms.config import settings
from miniapp_rooms.infrastructure.auth.launch_data import sign_launch_data


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("fields", nargs="+", metavar="KEY=VALUE")
    parser.add_argument("--bot-token", default=settings.BOT_TOKEN)
    args = parser.parse_args(argv)

    fields: dict[str, str] = {"auth_date": str(int(time.time()))}
    for item in args.fields:
        key, sep, value = item.partition("=")
        if not sep:
            parser.error(f"expected KEY=VALUE, got {item!r}")
        fields[key] = value

    if not args.bot_token:
        parser.error("BOT_TOKEN is not configured; pass --bot-token")
    print(sign_launch_data(fields, args.bot_token))


if __name__ == "__main__":
    main()
