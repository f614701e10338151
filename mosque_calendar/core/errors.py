class MosqueCalendarError(Exception):
    """Base class for errors that stop the application."""


class ClientConfigError(MosqueCalendarError):
    """The requested client document is missing or invalid."""
