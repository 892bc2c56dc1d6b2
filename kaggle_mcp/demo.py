"""Command that lists Kaggle competitions in a few sample ways."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone

from .client import KaggleClient
from .errors import KaggleMcpError
from .models import Competition

_LABELS = {
    "ref": ("ID", "ref"),
    "deadline": ("Deadline", "deadline"),
    "teams": ("Teams", "team_count"),
    "reward": ("Prize", "reward"),
    "category": ("Category", "category"),
    "url": ("URL", "url"),
}
_DESCRIPTION_LIMIT = 100
_RULE = "=" * 50


def _display_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    text = value.strftime("%Y-%m-%d %H:%M:%S")
    micro = value.microsecond
    if micro:
        text += f".{micro // 1000:03d}" if micro % 1000 == 0 else f".{micro:06d}"
    return f"{text} UTC"


def format_competition(competition: Competition, fields: Iterable[str] = ()) -> str:
    """Render a competition as its title line followed by the requested fields.

    Fields are ``ref``, ``deadline``, ``teams``, ``reward``, ``category``,
    ``url`` and ``description``; fields without a value are left out.
    """
    lines = [f"🏆 {competition.title}"]
    for field in fields:
        if field == "description":
            if competition.description is not None:
                lines.append(f"   {competition.description[:_DESCRIPTION_LIMIT]}...")
            continue
        try:
            label, attribute = _LABELS[field]
        except KeyError:
            raise ValueError(f"unknown competition field: {field!r}") from None
        value = getattr(competition, attribute)
        if value is None:
            continue
        if isinstance(value, datetime):
            value = _display_datetime(value)
        lines.append(f"   {label}: {value}")
    return "\n".join(lines)


def _section(title: str, competitions: list[Competition], limit: int, fields: Sequence[str]) -> None:
    print(title)
    print(_RULE)
    print()
    for competition in competitions[:limit]:
        print(format_competition(competition, fields))
        print()


def main(argv: Sequence[str] | None = None) -> int:
    """Authenticate from stored credentials and print sample competition listings."""
    parser = argparse.ArgumentParser(
        prog="kaggle-mcp-demo",
        description="List Kaggle competitions using stored credentials.",
    )
    parser.parse_args(argv)

    client = KaggleClient()
    try:
        client.load_credentials()
        print("🔐 Authenticated with Kaggle API")
        print()

        _section(
            "📋 All Competitions (latest deadline):",
            client.list_competitions(),
            5,
            ("ref", "deadline", "teams", "reward"),
        )
        _section(
            "\n🔍 Search for 'machine learning' competitions:",
            client.list_competitions(search="machine learning"),
            3,
            ("description",),
        )
        _section(
            "\n⭐ Featured Competitions:",
            client.list_competitions(category="featured"),
            3,
            ("category", "url"),
        )

        print("\n💰 Competitions sorted by prize:")
        print(_RULE)
        print()
        for competition in client.list_competitions(sort_by="prize")[:3]:
            reward = competition.reward if competition.reward is not None else "No prize"
            print(f"🏆 {competition.title} - {reward}")
            print()
    except KaggleMcpError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    print("\n💡 Tip: You can set credentials via environment variables:")
    print("   export KAGGLE_USERNAME=your_username")
    print("   export KAGGLE_KEY=placeholder")
    print("\n   Or create ~/.kaggle/kaggle.json:")
    print('   {"username":"your_username","key":"placeholder"}')
    return 0


if __name__ == "__main__":
    sys.exit(main())