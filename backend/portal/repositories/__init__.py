"""
Repositories package — data-access layer.

Each repository file handles all DB operations for one table.
Repositories do NOT handle HTTP concerns or business logic.

Convention:
    - One file per table (users.py, roles.py, mappings.py, categories.py)
    - All functions accept `AsyncSession` as the first argument
    - Read-only: the telephony schemas are managed by another system
"""
