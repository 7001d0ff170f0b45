# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Cookie-based session authentication for a JSON API.

A minimal reference service: log in by username, check the session, log out.
Session state lives entirely in a signed cookie held by the client.
"""

__version__ = "0.1.0"
