"""Error taxonomy shared by the initiator, poller and CLI."""


class MomoCollectError(Exception):
    """Base class for every error raised by the collection workflow."""


class ConfigurationError(MomoCollectError):
    """Raised when required settings (e.g. the API key) are missing or invalid."""


class ValidationError(MomoCollectError):
    """Raised when payer input is rejected before any network call."""


class TransportError(MomoCollectError):
    """Network-level failure talking to the gateway."""


class ParseError(TransportError):
    """Gateway answered with a body that could not be decoded."""


class GatewayRejected(MomoCollectError):
    """Gateway accepted the call but refused the collection request."""

    def __init__(self, code: str, message: str) -> None:
        self.code = code
        self.message = message
        super().__init__(f"{message} ({code})" if code else message)
