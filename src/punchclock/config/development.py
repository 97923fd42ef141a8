import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "punchclock"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Apply database/schema.sql on startup (idempotent: CREATE TABLE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also load database/seed.sql
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))

# Minutes around scheduled start/end that snap to the scheduled time
GRACE_MINUTES = int(os.getenv("GRACE_MINUTES", "30"))
# Same-type punches within this many minutes are refused
DEBOUNCE_MINUTES = int(os.getenv("DEBOUNCE_MINUTES", "5"))
# Handed to the kiosk page for its browser geolocation call
GEOLOCATION_TIMEOUT_MS = int(os.getenv("GEOLOCATION_TIMEOUT_MS", "10000"))

# Creates this admin on startup when no active admin exists
BOOTSTRAP_ADMIN_NAME = os.getenv("BOOTSTRAP_ADMIN_NAME", "Administrator")
BOOTSTRAP_ADMIN_PIN = os.getenv("BOOTSTRAP_ADMIN_PIN", "")
