"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ISO_DATE_FORMAT = "%Y-%m-%d"

# date.weekday() of the first day of a displayed week (Monday).
WEEK_START_WEEKDAY = 0
DAYS_IN_WEEK = 7
# Summaries cover a day or one Monday-Sunday week.
MAX_SUMMARY_DAYS = DAYS_IN_WEEK

PROVISIONAL_ID_PREFIX = "temp"
UPDATING_MESSAGE = "Updating attendance..."
NOTHING_TO_SAVE_MESSAGE = "No attendance data to save"
SAVE_IN_PROGRESS_MESSAGE = "Attendance is already being saved"
DEFAULT_SAVE_SUCCESS_MESSAGE = "Attendance saved successfully"
DEFAULT_SAVE_FAILED_MESSAGE = "Failed to save attendance"
DEFAULT_FETCH_FAILED_MESSAGE = "Failed to fetch attendance"

DEFAULT_HTTP_TIMEOUT_SECONDS = 10.0
