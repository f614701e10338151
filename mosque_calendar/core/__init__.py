from .errors import ClientConfigError, MosqueCalendarError

__all__ = ["ClientConfigError", "MosqueCalendarError"]
