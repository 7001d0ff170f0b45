# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Authentication helpers.

This package provides:
- User store loading from data/users.yml
- Signed session cookies (itsdangerous)
"""
