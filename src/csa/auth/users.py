# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    id: int
    username: str

    def public(self) -> Dict[str, Any]:
        return {"id": self.id, "username": self.username}


_Index = Tuple[Dict[str, User], Dict[int, User]]


def _index(users: Iterable[User]) -> _Index:
    by_name: Dict[str, User] = {}
    by_id: Dict[int, User] = {}
    for u in users:
        if u.username in by_name:
            logger.warning("Skipping duplicate username %r", u.username)
            continue
        if u.id in by_id:
            logger.warning("Skipping user %r: id %s already used by %r", u.username, u.id, by_id[u.id].username)
            continue
        by_name[u.username] = u
        by_id[u.id] = u
    return by_name, by_id


def parse_users(raw: Any) -> list[User]:
    """Turn the parsed YAML document into ``User`` records, skipping bad entries."""
    users = (raw.get("users") or {}) if isinstance(raw, dict) else {}
    if not isinstance(users, dict):
        return []
    out: list[User] = []
    for uname, udata in users.items():
        username = "" if uname is None else str(uname).strip()
        if not username or not isinstance(udata, dict):
            logger.warning("Skipping malformed user entry %r", uname)
            continue
        uid = udata.get("id")
        if isinstance(uid, bool) or not isinstance(uid, int):
            logger.warning("Skipping user %r: id must be an integer", username)
            continue
        out.append(User(id=uid, username=username))
    return out


def _load_users_file(path: Path) -> list[User]:
    if not path.exists():
        return []
    raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return parse_users(raw)


class UserStore:
    """Read-mostly user directory, backed by a YAML file or an in-memory list.

    File-backed stores re-read the file whenever its mtime changes.
    """

    def __init__(self, path: Optional[Path] = None, users: Optional[Iterable[User]] = None) -> None:
        if path is not None and users is not None:
            raise ValueError("Pass either path or users, not both")
        self.path = Path(path) if path is not None else None
        self._cache: Tuple[float, _Index] = (0.0, _index(users or ()))

    @classmethod
    def from_users(cls, users: Iterable[User]) -> "UserStore":
        return cls(users=users)

    def _current(self) -> _Index:
        if self.path is None:
            return self._cache[1]

        try:
            mtime = self.path.stat().st_mtime if self.path.exists() else 0.0
        except OSError:
            mtime = 0.0

        cached_mtime, cached = self._cache
        if mtime and mtime == cached_mtime:
            return cached

        try:
            index = _index(_load_users_file(self.path))
        except yaml.YAMLError as exc:
            # Keep serving the last good copy until the file is fixed (next mtime change).
            logger.error("Cannot parse %s, keeping %d cached user(s): %s", self.path, len(cached[0]), exc)
            self._cache = (mtime, cached)
            return cached
        if mtime:
            logger.info("Loaded %d user(s) from %s", len(index[0]), self.path)
        self._cache = (mtime, index)
        return index

    def all(self) -> Dict[str, User]:
        return dict(self._current()[0])

    def get(self, username: str) -> Optional[User]:
        u = (username or "").strip()
        if not u:
            return None
        return self._current()[0].get(u)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._current()[1].get(user_id)

    def add(self, username: str, user_id: int) -> User:
        """Add a user, persisting it to the YAML file for file-backed stores."""
        username = (username or "").strip()
        if not username:
            raise ValueError("Username must not be empty")
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            raise ValueError("User id must be an integer")

        by_name, by_id = self._current()
        if username in by_name:
            raise ValueError(f"User {username!r} already exists")
        if user_id in by_id:
            raise ValueError(f"User id {user_id} is already used by {by_id[user_id].username!r}")

        user = User(id=user_id, username=username)
        if self.path is None:
            self._cache = (0.0, _index([*by_name.values(), user]))
            return user

        if self.path.exists():
            raw = yaml.safe_load(self.path.read_text(encoding="utf-8")) or {}
        else:
            raw = {}
        if not isinstance(raw, dict):
            raw = {}
        raw.setdefault("version", 1)
        if not isinstance(raw.get("users"), dict):
            raw["users"] = {}
        raw["users"][username] = {"id": user_id}

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(yaml.safe_dump(raw, sort_keys=False, allow_unicode=True), encoding="utf-8")
        # Force a reload even if the filesystem mtime resolution hides the write.
        self._cache = (0.0, self._cache[1])
        return user

    def next_id(self) -> int:
        ids = self._current()[1]
        return max(ids, default=0) + 1
