"""
Application-wide constants.
Centralizes status messages and display limits.
"""

# Status messages shown to the user
MSG_MISSING_INPUT = "Please enter both reminder text and time"
MSG_INVALID_NUMBER = "Please enter a valid number"
MSG_REMINDER_SET = "Reminder set successfully"
MSG_SCHEDULE_FAILED = "Error setting reminder"
MSG_REMINDER_CANCELLED = "Reminder cancelled"
MSG_PERMISSION_DENIED = "Failed to get notification permissions"

# Notification content
DEFAULT_NOTIFICATION_TITLE = "Reminder!"

# Time constants
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
DEFAULT_SWEEP_INTERVAL_SECONDS = 60

# Display formatting
REMINDERS_DISPLAY_LIMIT = 20  # Maximum reminders to show in the list view
MAX_REMINDER_TEXT_LENGTH = 500
