from __future__ import annotations

import re
from dataclasses import dataclass

from sqlalchemy.engine import make_url

TEST_DB_NAME_RE = re.compile(r"test", re.IGNORECASE)
LOCAL_TEST_HOSTS = frozenset(
    {
        "localhost",
        "127.0.0.1",
        "::1",
        "postgres",
        "teamdraft_postgres",
    }
)


@dataclass(frozen=True, slots=True)
class DatabaseTargetCheck:
    is_safe: bool
    reason: str
    database_name: str
    host: str


def check_test_database_url(database_url: str) -> DatabaseTargetCheck:
    url = make_url(database_url)
    database_name = (url.database or "").strip()
    host = (url.host or "").strip().lower()

    def _result(is_safe: bool, reason: str) -> DatabaseTargetCheck:
        return DatabaseTargetCheck(
            is_safe=is_safe,
            reason=reason,
            database_name=database_name,
            host=host,
        )

    if url.get_backend_name() != "postgresql":
        return _result(False, "only PostgreSQL test databases are supported")
    if not database_name:
        return _result(False, "database name is empty")
    if TEST_DB_NAME_RE.search(database_name) is None:
        return _result(False, "database name must contain 'test'")
    if host not in LOCAL_TEST_HOSTS:
        return _result(False, "host is not a local test database host")
    return _result(True, "ok")


def ensure_test_database_url(database_url: str) -> None:
    result = check_test_database_url(database_url)
    if result.is_safe:
        return
    raise RuntimeError(
        "Refusing to drop and recreate tables outside a test database.\n"
        f"Reason: {result.reason}\n"
        f"Resolved DB: name='{result.database_name}' host='{result.host}'\n"
        "Use a dedicated local PostgreSQL database such as 'teamdraft_test'."
    )
