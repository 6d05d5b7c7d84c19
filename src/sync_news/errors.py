"""Errors raised by the news sync job."""


class NewsSyncInProgressError(RuntimeError):
    """A manual sync was requested while another sync is running."""

    def __init__(self, message: str = "News synchronization is already running"):
        super().__init__(message)
