import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "daycare_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads/payments")
MAX_PROOF_BYTES = int(os.getenv("MAX_PROOF_BYTES", str(5 * 1024 * 1024)))

# Original front desk rule, off by default: refuse check-in once hours run out.
BLOCK_CHECKIN_WITHOUT_HOURS = bool(int(os.getenv("BLOCK_CHECKIN_WITHOUT_HOURS", "0")))

# If enabled, app will apply the schema on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also seed demo data on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
