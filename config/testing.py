# Test runs use in-memory repositories; these values only matter when the
# app factory is pointed at a scratch MySQL schema by hand.
SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": "127.0.0.1",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "campus_attendance_test",
}

DEBUG = False
TESTING = True

# Short-lived tokens and a small lot keep fixtures easy to reason about.
TOKEN_MAX_AGE_SECONDS = 600
DEFAULT_TOTAL_SPACES = 10

# Never touch a database on app start under test.
AUTO_INIT_DB = False
AUTO_SEED_DB = False
