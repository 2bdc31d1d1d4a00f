"""
Domain Exceptions Module

Errors raised by the attendance rule engine. Per-row data problems never
raise; only structurally invalid input does.
"""


class AttendanceError(Exception):
    """Base exception for attendance-related errors."""
    pass


class InvalidInputError(AttendanceError):
    """Raised when the input itself is absent or not a sequence of rows."""
    pass
