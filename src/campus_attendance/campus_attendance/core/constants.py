"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

WEEKLY_MIN_DAYS = 4
MONTHLY_MIN_DAYS = 16
WEEK_WINDOW_DAYS = 7
MONTH_WINDOW_DAYS = 30

# Ranking bands (days present this month)
BAND_EXCELLENT_DAYS = 16
BAND_GOOD_DAYS = 12
BAND_FAIR_DAYS = 8

MIN_PASSWORD_LENGTH = 6
DEFAULT_TOTAL_SPACES = 100
DEFAULT_TOKEN_MAX_AGE_SECONDS = 12 * 60 * 60
DEFAULT_AUDIT_LIMIT = 200

IMPORT_DEFAULT_DEPARTMENT = "General"
IMPORT_DEFAULT_POSITION = "Staff"
