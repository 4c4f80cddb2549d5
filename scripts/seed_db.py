"""Load the demo admin and members, then print every account with its RFID and hours."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from daycare_membership.config import get_settings_module
from daycare_membership.database.bootstrap import apply_seed
from daycare_membership.database.connection import DatabaseConnection, DBConfig
from daycare_membership.members.model import Member
from daycare_membership.members.mysql_member_repository import MySQLMemberRepository


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    created = set(apply_seed(db_config))
    repo = MySQLMemberRepository(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))

    for account in repo.list_accounts():
        marker = "+" if account.email in created else " "
        if isinstance(account, Member):
            print(f"{marker} member {account.rfid_number}  {account.name:<20} {account.balance:>7.2f}h left")
        else:
            print(f"{marker} admin  {'':8}  {account.name:<20} {account.email}")


if __name__ == "__main__":
    main()
