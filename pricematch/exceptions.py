class PriceMatchError(Exception):
    """Base class for errors raised by the resolver."""


class BrowserLaunchError(PriceMatchError):
    """The shared Chromium process could not be started."""
