"""
Custom exception classes for the reminder core.
Provides specific error types instead of generic exceptions.
"""


class ReminderError(Exception):
    """Base exception for reminder operations."""

    pass


class ValidationError(ReminderError):
    """Raised when user input validation fails."""

    pass


class DuplicateReminderError(ReminderError):
    """Raised when a reminder id is already pending in the store."""

    pass


class ReconcilerStateError(ReminderError):
    """Raised when the reconciler is started twice."""

    pass


class GatewayError(ReminderError):
    """Base exception for notification gateway operations."""

    pass


class NotificationPermissionError(GatewayError):
    """Raised when notifications are not permitted."""

    pass


class NotificationNotFoundError(GatewayError):
    """Raised when no notification is scheduled under an id."""

    pass


class DeliveryError(GatewayError):
    """Raised when a delivery channel fails to send a notification."""

    pass
