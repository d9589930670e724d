class HumbleNotionError(Exception):
    """Base for every failure a script reports to the operator."""


class ConfigError(HumbleNotionError):
    """Required configuration is missing or invalid."""


class TransportError(HumbleNotionError):
    """The request never produced a response (DNS, timeout, connection reset)."""


class RemoteApiError(HumbleNotionError):
    """Notion answered with an error status."""

    def __init__(self, status: int, code: str = "", message: str = ""):
        self.status = status
        self.code = code
        self.message = message
        super().__init__(f"Notion API error [{status} {code or 'unknown'}]: {message}")


class ContainerNotFoundError(RemoteApiError):
    """The database id does not exist or is not shared with the integration."""


class ScrapeError(HumbleNotionError):
    """The storefront did not behave the way the scraper expects."""
