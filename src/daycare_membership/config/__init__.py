import os


def get_settings_module() -> str:
    # Environment comes from APP_ENV, default 'development'
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "daycare_membership.config.production"

    if env in {"test", "testing"}:
        return "daycare_membership.config.testing"

    return "daycare_membership.config.development"
