import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "campus_attendance"),
}

DEBUG = True

# Bearer tokens expire after this many seconds (12h).
TOKEN_MAX_AGE_SECONDS = int(os.getenv("TOKEN_MAX_AGE_SECONDS", "43200"))

# Size of the parking lot created on first seed.
DEFAULT_TOTAL_SPACES = int(os.getenv("DEFAULT_TOTAL_SPACES", "100"))

# Apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Also create the default accounts and parking row
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "1")))
