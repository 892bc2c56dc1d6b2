"""Data models exchanged with the Kaggle API."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from .errors import JsonError

_I32 = (-(2**31), 2**31 - 1)
_I64 = (-(2**63), 2**63 - 1)

_DATETIME = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})[Tt ](\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?"
    r"(Z|z|[+-]\d{2}:\d{2})$"
)


def _object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise JsonError(f"invalid type: expected a JSON object, got {type(data).__name__}")
    return data


def _get(
    data: Mapping[str, Any],
    key: str,
    kind: type,
    *,
    optional: bool = False,
    bounds: tuple[int, int] | None = None,
) -> Any:
    if key not in data:
        if optional:
            return None
        raise JsonError(f"missing field `{key}`")
    value = data[key]
    if value is None:
        if optional:
            return None
        raise JsonError(f"invalid type: null for field `{key}`")
    if kind is int:
        valid = isinstance(value, int) and not isinstance(value, bool)
    else:
        valid = isinstance(value, kind)
    if not valid:
        raise JsonError(
            f"invalid type for field `{key}`: expected {kind.__name__}, "
            f"got {type(value).__name__}"
        )
    if bounds is not None and not bounds[0] <= value <= bounds[1]:
        raise JsonError(f"value {value} out of range for field `{key}`")
    return value


def _parse_datetime(text: str) -> datetime:
    match = _DATETIME.match(text)
    if match is None:
        raise JsonError(f"invalid RFC 3339 datetime: {text!r}")
    year, month, day, hour, minute, second, fraction, offset = match.groups()
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    if offset in ("Z", "z"):
        tz = timezone.utc
    else:
        sign = -1 if offset[0] == "-" else 1
        hours, minutes = offset[1:].split(":")
        tz = timezone(sign * timedelta(hours=int(hours), minutes=int(minutes)))
    try:
        value = datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tz
        )
    except ValueError as exc:
        raise JsonError(f"invalid datetime {text!r}: {exc}") from exc
    return value.astimezone(timezone.utc)


def _format_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    base = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond == 0:
        return f"{base}Z"
    if value.microsecond % 1000 == 0:
        return f"{base}.{value.microsecond // 1000:03d}Z"
    return f"{base}.{value.microsecond:06d}Z"


@dataclass
class KaggleCredentials:
    """A Kaggle username and API key."""

    username: str
    key: str

    def to_dict(self) -> dict[str, Any]:
        return {"username": self.username, "key": self.key}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> KaggleCredentials:
        data = _object(data)
        return cls(username=_get(data, "username", str), key=_get(data, "key", str))


@dataclass
class AuthenticationRequest:
    """Credentials supplied through the authenticate tool."""

    kaggle_username: str
    kaggle_key: str

    def to_dict(self) -> dict[str, Any]:
        return {"kaggle_username": self.kaggle_username, "kaggle_key": self.kaggle_key}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AuthenticationRequest:
        data = _object(data)
        return cls(
            kaggle_username=_get(data, "kaggle_username", str),
            kaggle_key=_get(data, "kaggle_key", str),
        )


@dataclass
class AuthenticationResponse:
    """The outcome of an authentication attempt."""

    success: bool
    message: str
    username: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "message": self.message, "username": self.username}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AuthenticationResponse:
        data = _object(data)
        return cls(
            success=_get(data, "success", bool),
            message=_get(data, "message", str),
            username=_get(data, "username", str, optional=True),
        )


@dataclass
class Competition:
    """A Kaggle competition as listed by the API."""

    ref: str
    title: str
    url: str
    category: str
    deadline: datetime | None
    reward: str | None
    team_count: int
    user_has_entered: bool
    description: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref": self.ref,
            "title": self.title,
            "url": self.url,
            "category": self.category,
            "deadline": None if self.deadline is None else _format_datetime(self.deadline),
            "reward": self.reward,
            "teamCount": self.team_count,
            "userHasEntered": self.user_has_entered,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Competition:
        data = _object(data)
        deadline = _get(data, "deadline", str, optional=True)
        return cls(
            ref=_get(data, "ref", str),
            title=_get(data, "title", str),
            url=_get(data, "url", str),
            category=_get(data, "category", str),
            deadline=None if deadline is None else _parse_datetime(deadline),
            reward=_get(data, "reward", str, optional=True),
            team_count=_get(data, "teamCount", int, bounds=_I32),
            user_has_entered=_get(data, "userHasEntered", bool),
            description=_get(data, "description", str, optional=True),
        )


@dataclass
class CompetitionListRequest:
    """Filters for listing competitions; every field is optional."""

    search: str | None = None
    category: str | None = None
    group: str | None = None
    sort_by: str | None = None
    page: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "search": self.search,
            "category": self.category,
            "group": self.group,
            "sort_by": self.sort_by,
            "page": self.page,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CompetitionListRequest:
        data = _object(data)
        return cls(
            search=_get(data, "search", str, optional=True),
            category=_get(data, "category", str, optional=True),
            group=_get(data, "group", str, optional=True),
            sort_by=_get(data, "sort_by", str, optional=True),
            page=_get(data, "page", int, optional=True, bounds=_I32),
        )


@dataclass
class KaggleConfig:
    """Client settings: default competition, download path and proxy."""

    competition: str | None = None
    path: Path | None = None
    proxy: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "competition": self.competition,
            "path": None if self.path is None else str(self.path),
            "proxy": self.proxy,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> KaggleConfig:
        data = _object(data)
        path = _get(data, "path", str, optional=True)
        return cls(
            competition=_get(data, "competition", str, optional=True),
            path=None if path is None else Path(path),
            proxy=_get(data, "proxy", str, optional=True),
        )


@dataclass
class Dataset:
    """A Kaggle dataset."""

    id: str
    title: str
    subtitle: str | None
    creator_name: str
    total_bytes: int
    url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "creator_name": self.creator_name,
            "total_bytes": self.total_bytes,
            "url": self.url,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Dataset:
        data = _object(data)
        return cls(
            id=_get(data, "id", str),
            title=_get(data, "title", str),
            subtitle=_get(data, "subtitle", str, optional=True),
            creator_name=_get(data, "creator_name", str),
            total_bytes=_get(data, "total_bytes", int, bounds=_I64),
            url=_get(data, "url", str),
        )


@dataclass
class Kernel:
    """A Kaggle kernel (notebook or script)."""

    ref: str
    title: str
    author: str
    language: str
    kernel_type: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "ref_": self.ref,
            "title": self.title,
            "author": self.author,
            "language": self.language,
            "kernel_type": self.kernel_type,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Kernel:
        data = _object(data)
        return cls(
            ref=_get(data, "ref_", str),
            title=_get(data, "title", str),
            author=_get(data, "author", str),
            language=_get(data, "language", str),
            kernel_type=_get(data, "kernel_type", str),
        )


@dataclass
class Model:
    """A Kaggle model."""

    id: str
    title: str
    subtitle: str | None
    author: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "author": self.author,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Model:
        data = _object(data)
        return cls(
            id=_get(data, "id", str),
            title=_get(data, "title", str),
            subtitle=_get(data, "subtitle", str, optional=True),
            author=_get(data, "author", str),
        )