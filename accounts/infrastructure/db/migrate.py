from __future__ import annotations

import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import psycopg

from accounts.settings import get_settings

DEFAULT_MIGRATIONS_DIR = Path(os.environ.get("MIGRATIONS_DIR", "migrations"))
SCHEMA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS schema_migrations (
  version    text PRIMARY KEY,
  applied_at timestamptz NOT NULL DEFAULT now()
);
"""

USAGE = "usage: python -m accounts.infrastructure.db.migrate [up|status|new <name>]"


class MigrationError(Exception):
    pass


def log(msg: str) -> None:
    print(msg, flush=True)


def list_migrations(migrations_dir: Path) -> list[Path]:
    if not migrations_dir.exists():
        raise MigrationError(f"migrations dir not found: {migrations_dir}")
    return sorted(migrations_dir.glob("*.sql"))


def pending_migrations(available: list[Path], applied: set[str]) -> list[Path]:
    return [p for p in available if p.stem not in applied]


def applied_versions(conn: psycopg.Connection) -> set[str]:
    with conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute("SELECT version FROM schema_migrations ORDER BY version;")
        rows = cur.fetchall()
    return {r[0] for r in rows}


def apply_one(conn: psycopg.Connection, path: Path) -> None:
    version = path.stem
    sql = path.read_text(encoding="utf-8")
    log(f"==> applying {version}")
    with conn.cursor() as cur:
        cur.execute(sql)
        cur.execute(
            "INSERT INTO schema_migrations (version, applied_at) VALUES (%s, now());",
            (version,),
        )
    conn.commit()
    log(f"applied {version}")


def cmd_up(dsn: str, migrations_dir: Path) -> int:
    available = list_migrations(migrations_dir)
    with psycopg.connect(dsn, autocommit=False) as conn:
        to_run = pending_migrations(available, applied_versions(conn))
        conn.commit()
        if not to_run:
            log("No pending migrations.")
            return 0
        for path in to_run:
            try:
                apply_one(conn, path)
            except psycopg.Error as e:
                conn.rollback()
                print(f"failed {path.stem}: {e}", file=sys.stderr)
                return 1
    return 0


def cmd_status(dsn: str, migrations_dir: Path) -> int:
    available = list_migrations(migrations_dir)
    with psycopg.connect(dsn) as conn, conn.cursor() as cur:
        cur.execute(SCHEMA_TABLE_SQL)
        cur.execute(
            "SELECT version, applied_at FROM schema_migrations ORDER BY version;"
        )
        rows = cur.fetchall()
    applied = {v for v, _ in rows}
    print("=== Applied ===")
    for v, at in rows:
        print(f"{v} @ {at.isoformat() if isinstance(at, datetime) else at}")
    print("=== Pending ===")
    for path in pending_migrations(available, applied):
        print(path.stem)
    return 0


def cmd_new(name: str, migrations_dir: Path) -> Path:
    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M")
    path = migrations_dir / f"{ts}_{name}.sql"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("-- write your SQL here\n", encoding="utf-8")
    return path


def main(argv: list[str], migrations_dir: Path = DEFAULT_MIGRATIONS_DIR) -> int:
    if len(argv) < 2:
        print(USAGE, file=sys.stderr)
        return 2
    cmd = argv[1]
    try:
        if cmd == "up":
            return cmd_up(get_settings().database_url, migrations_dir)
        if cmd == "status":
            return cmd_status(get_settings().database_url, migrations_dir)
        if cmd == "new":
            if len(argv) < 3:
                print("usage: ... new <name>", file=sys.stderr)
                return 2
            print(str(cmd_new(argv[2], migrations_dir)))
            return 0
    except MigrationError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2
    print(f"unknown command: {cmd}", file=sys.stderr)
    return 2


def cli() -> None:
    raise SystemExit(main(sys.argv))


if __name__ == "__main__":
    cli()
