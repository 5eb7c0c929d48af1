class LunchBotError(Exception):
    """Base class for everything the bot raises on purpose."""


class ConfigError(LunchBotError):
    """Required configuration is missing or invalid."""


class NotFoundError(LunchBotError):
    """No lunch on the menu for the requested day."""


class ApiError(LunchBotError):
    """A downstream service failed or answered with something unusable."""


class TransientNetworkError(ApiError):
    """A single upload attempt failed. Only retried by the uploader."""


class UploadSlotError(ApiError):
    pass


class UploadTransferError(ApiError):
    pass


class UploadFinalizeError(ApiError):
    pass
