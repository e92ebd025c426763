"""
Services package — business logic between the routes and the repositories.

    credentials.py — NIP/email + password validation
    roles.py       — role directory and role classification
    hierarchy.py   — supervisory hierarchy resolution and formatting
    superset.py    — Superset guest-token exchange
"""
