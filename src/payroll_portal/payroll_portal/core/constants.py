"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

DEFAULT_APP_NAMESPACE = "payroll-app-v1"

PAYROLL_COLLECTION = "payrollData"
USERS_COLLECTION = "users"

# Fixed display/export priority of known teams; anything else sorts after.
DEFAULT_TEAM_ORDER = ("0", "1", "2", "3", "4", "5", "W", "J", "B", "C", "기타")

PERIOD_YEAR_CHOICES = 5

EXPORT_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
