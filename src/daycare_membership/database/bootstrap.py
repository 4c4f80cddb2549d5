from __future__ import annotations

import logging
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

logger = logging.getLogger(__name__)

# open_member_id is NULL for closed sessions, so the unique key only bites on
# open ones: at most one open attendance record per member.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    user_id INT AUTO_INCREMENT PRIMARY KEY,
    role VARCHAR(20) NOT NULL,
    name VARCHAR(120) NOT NULL,
    email VARCHAR(190) NOT NULL,
    password_hash VARCHAR(255) NOT NULL DEFAULT '',
    phone VARCHAR(40) NULL,
    address VARCHAR(255) NULL,
    position VARCHAR(120) NULL,
    rfid_number CHAR(8) NULL,
    membership_hours DOUBLE NOT NULL DEFAULT 0,
    total_hours_used DOUBLE NOT NULL DEFAULT 0,
    is_active TINYINT(1) NOT NULL DEFAULT 1,
    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
    UNIQUE KEY uq_users_email (email),
    UNIQUE KEY uq_users_rfid (rfid_number),
    CONSTRAINT chk_users_membership_hours CHECK (membership_hours >= 0),
    CONSTRAINT chk_users_total_hours_used CHECK (total_hours_used >= 0)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS attendance_records (
    attendance_id INT AUTO_INCREMENT PRIMARY KEY,
    member_id INT NOT NULL,
    member_name VARCHAR(120) NOT NULL,
    rfid_number CHAR(8) NOT NULL,
    check_in_time DATETIME NOT NULL,
    check_out_time DATETIME NULL,
    hours_spent DOUBLE NULL,
    open_member_id INT GENERATED ALWAYS AS (IF(check_out_time IS NULL, member_id, NULL)) STORED,
    UNIQUE KEY uq_attendance_open_session (open_member_id),
    KEY idx_attendance_member (member_id, check_in_time),
    KEY idx_attendance_check_in (check_in_time),
    CONSTRAINT fk_attendance_member FOREIGN KEY (member_id) REFERENCES users(user_id)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;

CREATE TABLE IF NOT EXISTS payment_requests (
    request_id INT AUTO_INCREMENT PRIMARY KEY,
    member_id INT NOT NULL,
    member_name VARCHAR(120) NOT NULL,
    amount DOUBLE NOT NULL,
    hours_requested DOUBLE NOT NULL,
    request_date DATETIME NOT NULL,
    payment_proof_image VARCHAR(255) NOT NULL,
    status VARCHAR(20) NOT NULL DEFAULT 'pending',
    approved_by INT NULL,
    approval_date DATETIME NULL,
    KEY idx_payment_member (member_id, request_date),
    KEY idx_payment_status (status),
    CONSTRAINT fk_payment_member FOREIGN KEY (member_id) REFERENCES users(user_id)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4;
"""


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, sql: str = SCHEMA_SQL) -> None:
    ensure_database_exists(db_config)
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied to %s", db_config.get("database"))


def apply_seed(db_config: dict) -> list[str]:
    """Insert a demo admin and two demo members (idempotent on email).

    Returns the emails that were actually inserted.
    """

    created: list[str] = []

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        def upsert(role: str, name: str, email: str, password: str, **extra) -> None:
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                return
            columns = ["role", "name", "email", "password_hash", *extra.keys()]
            values = [role, name, email, generate_password_hash(password), *extra.values()]
            placeholders = ",".join(["%s"] * len(values))
            cur.execute(f"INSERT INTO users({','.join(columns)}) VALUES({placeholders})", tuple(values))
            created.append(email)

        upsert("admin", "Admin Demo", "admin@daycare.local", "admin123", position="Front desk")
        upsert("member", "Jane Smith", "jane@daycare.local", "member123", rfid_number="RF123456", membership_hours=20)
        upsert("member", "John Doe", "john@daycare.local", "member123", rfid_number="RF654321", membership_hours=10)

        conn.commit()
    finally:
        conn.close()
    logger.info("Demo seed ready in %s (%d new accounts)", db_config.get("database"), len(created))
    return created


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
