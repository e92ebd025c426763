#!/usr/bin/env python3
"""
Telephony Dashboard Portal — Management Tool

Single entry point for running the API and diagnosing users.
Usage: python manage.py <command> [options]
"""

import asyncio
import json
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional


# ═══════════════════════════════════════════════════════════
#  Logging Setup
# ═══════════════════════════════════════════════════════════

class ColorFormatter(logging.Formatter):
    """Console formatter with ANSI colors and level symbols."""

    COLORS = {
        "INFO": "\033[96m",        # Cyan
        "SUCCESS": "\033[92m",     # Green
        "WARNING": "\033[93m",     # Yellow
        "ERROR": "\033[91m",       # Red
        "CRITICAL": "\033[91m\033[1m",  # Bold Red
        "DEBUG": "\033[94m",       # Blue
        "HEADER": "\033[95m",      # Magenta
        "BOLD": "\033[1m",
        "RESET": "\033[0m",
    }

    SYMBOLS = {
        "INFO": "→",
        "SUCCESS": "✓",
        "WARNING": "⚠",
        "ERROR": "✗",
        "CRITICAL": "☠",
        "DEBUG": "•",
        "STEP": "▶",
    }

    def __init__(self, use_colors: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.platform != "win32"

    def _colorize(self, text: str, color_name: str) -> str:
        if not self.use_colors:
            return text
        color = self.COLORS.get(color_name, "")
        return f"{color}{text}{self.COLORS['RESET']}" if color else text

    def format(self, record: logging.LogRecord) -> str:
        msg = str(record.msg)

        if "[SUCCESS]" in msg:
            symbol, color = self.SYMBOLS["SUCCESS"], "SUCCESS"
        elif "[WARNING]" in msg:
            symbol, color = self.SYMBOLS["WARNING"], "WARNING"
        elif "[ERROR]" in msg:
            symbol, color = self.SYMBOLS["ERROR"], "ERROR"
        elif "[STEP]" in msg:
            symbol, color = self.SYMBOLS["STEP"], "INFO"
        else:
            symbol, color = self.SYMBOLS.get(record.levelname, ""), record.levelname

        if symbol and not msg.startswith(("===", " ")):
            record.msg = f"{symbol} {msg}"

        if self.use_colors:
            if msg.startswith("==="):
                record.msg = self._colorize(str(record.msg), "HEADER")
            else:
                record.msg = self._colorize(str(record.msg), color)

        return super().format(record)


# --- Bootstrap logger --------------------------------------------------------
_log_dir = "logs"
os.makedirs(_log_dir, exist_ok=True)
_log_file = os.path.join(_log_dir, f"manage-{datetime.now():%Y%m%d}.log")

_file_handler = logging.FileHandler(_log_file, encoding="utf-8")
_file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))

_console_handler = logging.StreamHandler()
_console_handler.setFormatter(ColorFormatter())

logging.basicConfig(level=logging.INFO, handlers=[_file_handler, _console_handler])
logger = logging.getLogger("manage")


# ═══════════════════════════════════════════════════════════
#  Portal Manager
# ═══════════════════════════════════════════════════════════

class PortalManager:
    """Operator commands against the configured telephony databases."""

    def __init__(self):
        from portal.core.config import settings
        from portal.db.session import DatabaseRegistry
        from portal.services.roles import RoleDirectory

        self.settings = settings
        self.registry = DatabaseRegistry(settings)
        self.roles = RoleDirectory(
            tenant_role_ids=settings.TENANT_ROLE_IDS,
            super_admin_role_ids=settings.SUPER_ADMIN_ROLE_IDS,
        )

    async def _close(self) -> None:
        await self.registry.dispose()

    # ─── Server ───────────────────────────────────────────
    def serve(self, host: str = "0.0.0.0", port: int = 8000, reload: bool = False) -> None:
        """Run the API with uvicorn."""
        import uvicorn

        logger.info(f"\n=== Serving Portal API ({self.settings.APP_ENV}) ===")
        logger.info(f"[STEP] Listening on http://{host}:{port}")
        uvicorn.run("portal.main:app", host=host, port=port, reload=reload)

    # ─── Databases ────────────────────────────────────────
    def databases(self) -> None:
        """List logical databases and whether their URL is set."""
        logger.info("\n=== Databases ===")
        for info in self.registry.describe():
            state = "[SUCCESS] configured" if info["configured"] else "[WARNING] missing"
            logger.info(f"{state}: {info['name']} ({info['env_var']})")
            logger.info(f"  {info['description']}")

    # ─── Users ────────────────────────────────────────────
    async def check_user(self, identifier: str) -> None:
        """Find a user by id, NIP or email and show the account row."""
        from portal.core.constants import DatabaseName
        from portal.repositories import users as user_repository

        logger.info(f"\n=== Checking user: {identifier} ===")
        try:
            async with self.registry.session(DatabaseName.TELEPHONY_ACCOUNT) as db:
                user = await user_repository.find_user(db, identifier)
                if user is None:
                    logger.error("[ERROR] User not found by id, NIP or email")
                    return
                role = await self.roles.get(db, user.id_role)
        finally:
            await self._close()

        logger.info("[SUCCESS] User found")
        logger.info(f"  id_user:   {user.id_user}")
        logger.info(f"  nip:       {user.nip}")
        logger.info(f"  email:     {user.email}")
        logger.info(f"  full_name: {user.full_name}")
        logger.info(f"  spv_id:    {user.spv_id}")
        logger.info(f"  id_tenant: {user.id_tenant}")
        logger.info(f"  password:  {'set' if user.password else 'MISSING'}")
        if role is None:
            logger.warning(f"[WARNING] Role {user.id_role!r} not found")
        else:
            logger.info(
                f"  role:      {role.role_id} {role.role_name!r} "
                f"level={role.access_level} category={role.category.value}"
            )

    async def chain(self, user_id: str) -> None:
        """Print the supervisor chain above a user with each role."""
        from portal.core.constants import DatabaseName
        from portal.repositories import users as user_repository
        from portal.services.hierarchy import walk_supervisors

        logger.info(f"\n=== Supervisor chain for: {user_id} ===")
        try:
            async with self.registry.session(DatabaseName.TELEPHONY_ACCOUNT) as db:
                user = await user_repository.get_user_by_id(db, user_id)
                if user is None:
                    logger.error("[ERROR] User not found")
                    return
                chain = await walk_supervisors(
                    db, user, max_hops=self.settings.HIERARCHY_MAX_SUPERVISOR_HOPS
                )
                rows = []
                for member in [user, *chain]:
                    role = await self.roles.get(db, member.id_role)
                    rows.append((member, role))
        finally:
            await self._close()

        for depth, (member, role) in enumerate(rows):
            label = f"{role.role_name} (level {role.access_level})" if role else "no role"
            logger.info(f"  {'  ' * depth}{member.id_user} {member.full_name or ''} — {label}")
        if rows[-1][0].spv_id:
            logger.info(f"[WARNING] Walk stopped at {rows[-1][0].id_user} (spv_id={rows[-1][0].spv_id})")

    async def hierarchy(self, user_id: str, full_walk: bool = False, with_name: bool = False) -> None:
        """Resolve and format a user's hierarchy string."""
        from portal.core.constants import DatabaseName
        from portal.services.hierarchy import format_hierarchy, resolve_hierarchy

        logger.info(f"\n=== Hierarchy for: {user_id} ===")
        try:
            async with (
                self.registry.session(DatabaseName.TELEPHONY_ACCOUNT) as account_db,
                self.registry.session(DatabaseName.TELEPHONY_MASTER) as master_db,
            ):
                result = await resolve_hierarchy(
                    account_db,
                    master_db,
                    self.roles,
                    user_id,
                    agent_fast_path=not full_walk and self.settings.HIERARCHY_AGENT_FAST_PATH,
                    max_hops=self.settings.HIERARCHY_MAX_SUPERVISOR_HOPS,
                )
        finally:
            await self._close()

        logger.info(json.dumps(result.to_dict(), indent=2))
        logger.info(f"[SUCCESS] {format_hierarchy(result, include_full_name=with_name)}")


# ═══════════════════════════════════════════════════════════
#  Client session
# ═══════════════════════════════════════════════════════════

async def client_login(base_url: str, identifier: str, password: str, storage: str) -> None:
    from portal.client import AuthStore, PortalClient, PortalClientError

    logger.info(f"\n=== Signing in to {base_url} ===")
    store = AuthStore(storage)
    try:
        state = await PortalClient(base_url).sign_in(identifier, password, store)
    except PortalClientError as exc:
        logger.error(f"[ERROR] {exc}")
        return
    logger.info(f"[SUCCESS] Signed in as {state.full_name} (level {state.access_level})")
    logger.info(f"  dashboard: {state.dashboard_id}")
    logger.info(f"  stored in: {store.path}")


def client_logout(storage: str) -> None:
    from portal.client import AuthStore, PortalClient

    PortalClient.sign_out(AuthStore(storage))
    logger.info("[SUCCESS] Session cleared")


# ═══════════════════════════════════════════════════════════
#  CLI
# ═══════════════════════════════════════════════════════════

USAGE = f"""
{ColorFormatter.COLORS['HEADER']}Telephony Dashboard Portal — Management{ColorFormatter.COLORS['RESET']}
{'═' * 50}

{ColorFormatter.COLORS['BOLD']}Usage:{ColorFormatter.COLORS['RESET']} python manage.py <command> [options]

{ColorFormatter.COLORS['BOLD']}Commands:{ColorFormatter.COLORS['RESET']}
    {ColorFormatter.COLORS['INFO']}serve{ColorFormatter.COLORS['RESET']}             Run the API (--port=N, --reload)
    {ColorFormatter.COLORS['INFO']}databases{ColorFormatter.COLORS['RESET']}         Show configured databases
    {ColorFormatter.COLORS['INFO']}check-user ID{ColorFormatter.COLORS['RESET']}     Find a user by id, NIP or email
    {ColorFormatter.COLORS['INFO']}chain ID{ColorFormatter.COLORS['RESET']}          Show the supervisor chain above a user
    {ColorFormatter.COLORS['INFO']}hierarchy ID{ColorFormatter.COLORS['RESET']}      Resolve a hierarchy (--full-walk, --with-name)
    {ColorFormatter.COLORS['INFO']}login ID PASS{ColorFormatter.COLORS['RESET']}     Sign in through a running API (--url=, --storage=)
    {ColorFormatter.COLORS['WARNING']}logout{ColorFormatter.COLORS['RESET']}            Clear the stored session (--storage=)

{ColorFormatter.COLORS['BOLD']}Examples:{ColorFormatter.COLORS['RESET']}
    python manage.py serve --reload
    python manage.py check-user 1234
    python manage.py hierarchy INT000367 --full-walk
    python manage.py login agent@example.com secret --url=http://localhost:8000
"""


def _option(opts: List[str], name: str, default: Optional[str] = None) -> Optional[str]:
    for o in opts:
        if o.startswith(f"--{name}="):
            return o.split("=", 1)[1]
    return default


def main() -> None:
    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        print(USAGE)
        sys.exit(0)

    command = sys.argv[1]
    opts = sys.argv[2:]
    args = [o for o in opts if not o.startswith("--")]
    storage = _option(opts, "storage", os.path.join(os.path.expanduser("~"), ".portal", "auth-storage.json"))

    # structlog events from the service modules go to the console and file handlers
    from portal.core.logging import setup_logging
    setup_logging("INFO", install_handler=False)

    try:
        if command == "serve":
            PortalManager().serve(port=int(_option(opts, "port", "8000")), reload="--reload" in opts)
        elif command == "databases":
            PortalManager().databases()
        elif command in ("check-user", "chain", "hierarchy") and not args:
            logger.error(f"{command} needs a user id")
            sys.exit(1)
        elif command == "check-user":
            asyncio.run(PortalManager().check_user(args[0]))
        elif command == "chain":
            asyncio.run(PortalManager().chain(args[0]))
        elif command == "hierarchy":
            asyncio.run(PortalManager().hierarchy(
                args[0],
                full_walk="--full-walk" in opts,
                with_name="--with-name" in opts,
            ))
        elif command == "login":
            if len(args) < 2:
                logger.error("login needs an identifier and a password")
                sys.exit(1)
            url = _option(opts, "url", "http://localhost:8000")
            asyncio.run(client_login(url, args[0], args[1], storage))
        elif command == "logout":
            client_logout(storage)
        else:
            logger.error(f"Unknown command: {command}")
            print(USAGE)
            sys.exit(1)
    except Exception as exc:
        logger.error(f"Operation failed: {exc}")
        sys.exit(1)


if __name__ == "__main__":
    main()
