"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from daycare_membership.config import get_settings_module
from daycare_membership.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)
    service = container.attendance_service

    checked_in = service.check_in("RF123456")
    print("checked in:", checked_in.to_dict())

    checked_out = service.check_out("RF123456")
    print("checked out:", checked_out.to_dict())

    print("stats:", service.get_stats().to_dict())


if __name__ == "__main__":
    main()
