#!/usr/bin/env python3
from __future__ import annotations

from csa.auth.users import UserStore
from csa.config import load_settings


def main() -> None:
    settings = load_settings()
    store = UserStore(settings.users_path)

    username = input("Username: ").strip()
    suggested = store.next_id()
    id_in = input(f"Id [{suggested}]: ").strip()
    try:
        user_id = int(id_in) if id_in else suggested
    except ValueError:
        raise SystemExit(f"Invalid id: {id_in!r}")

    try:
        user = store.add(username, user_id)
    except ValueError as exc:
        raise SystemExit(str(exc))
    print(f"OK -> {user.username} (id={user.id}) in {settings.users_path}")


if __name__ == "__main__":
    main()
