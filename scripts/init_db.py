"""Create the daycare schema; pass --seed to also load the demo accounts."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from daycare_membership.config import get_settings_module
from daycare_membership.database.bootstrap import SCHEMA_SQL, apply_schema, apply_seed, list_tables


def main(argv: list[str]) -> int:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    expected = {"users", "attendance_records", "payment_requests"}

    apply_schema(db_config, sql=SCHEMA_SQL)
    tables = set(list_tables(db_config))
    for name in sorted(expected):
        print(f"  {'ok' if name in tables else 'MISSING'}  {name}")

    missing = expected - tables
    if missing:
        print(f"Schema incomplete in {db_config.get('database')}: {', '.join(sorted(missing))}")
        return 1

    if "--seed" in argv:
        created = apply_seed(db_config)
        print(f"Seeded {len(created)} demo account(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
