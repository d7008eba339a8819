"""Command line entry point: ``healthprofiler [serve|rotate-keys]``."""

from __future__ import annotations

import argparse
import logging
import sqlite3
from ipaddress import ip_address

from healthprofiler.core.config.settings import Settings, get_settings
from healthprofiler.core.server.app import create_app
from healthprofiler.core.storage.database import DatabaseError, ProfileDatabase
from healthprofiler.core.storage.encryption import EncryptionError, FieldEncryptor
from healthprofiler.core.storage.repository import SQLiteProfileStore, StoreError

logger = logging.getLogger(__name__)


def _is_loopback_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def serve(settings: Settings) -> None:
    """Start the MCP server over Streamable HTTP."""
    if not settings.profiler_allow_insecure_bind and not _is_loopback_host(settings.profiler_host):
        raise RuntimeError(
            "Refusing to bind the profiler to a non-loopback host without an auth layer. "
            "Set PROFILER_ALLOW_INSECURE_BIND=true to override (unsafe)."
        )
    logger.info("Starting Health Profiler on %s:%d", settings.profiler_host, settings.profiler_port)
    create_app().run(
        transport="streamable-http",
        host=settings.profiler_host,
        port=settings.profiler_port,
    )


def rotate_keys(settings: Settings) -> int:
    """Re-seal stored profiles under the first key in ENCRYPTION_KEY."""
    encryptor = FieldEncryptor(settings.encryption_key)
    with ProfileDatabase(settings.db_path) as database:
        store = SQLiteProfileStore(database, encryptor, retention=settings.profile_retention)
        return store.rotate_keys()


def run(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="healthprofiler")
    parser.add_argument(
        "command",
        nargs="?",
        default="serve",
        choices=("serve", "rotate-keys"),
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.profiler_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "rotate-keys":
        try:
            count = rotate_keys(settings)
        except (EncryptionError, StoreError, DatabaseError, sqlite3.Error) as exc:
            logger.error("Key rotation failed: %s", exc)
            raise SystemExit(1) from exc
        logger.info("Re-encrypted %d stored profiles in %s", count, settings.db_path)
        return
    serve(settings)


if __name__ == "__main__":
    run()
