"""Error taxonomy for the generation, rendering and persistence paths."""

EMPTY_RESPONSE_MESSAGE = (
    "The AI model returned an empty response. This might be due to a content "
    "safety filter or an issue with the prompt. Please try again or adjust your request."
)
MALFORMED_RESPONSE_MESSAGE = (
    "The AI model returned a response that was not valid JSON. This can happen "
    "on complex requests. Please try again."
)


class ForgeError(Exception):
    """Base class for all RTL Forge errors."""


class EmptyResponseError(ForgeError):
    """The model call succeeded but returned no usable text."""

    def __init__(self, message: str = EMPTY_RESPONSE_MESSAGE):
        super().__init__(message)


class MalformedResponseError(ForgeError):
    """The model reply could not be parsed into the declared structured shape."""

    def __init__(self, message: str = MALFORMED_RESPONSE_MESSAGE):
        super().__init__(message)


class UpstreamError(ForgeError):
    """The model call itself failed (transport, auth, quota)."""


class RenderError(ForgeError):
    """An artifact could not be rendered by its viewer."""


class PersistenceError(ForgeError):
    """The local key-value store could not be read or written."""


class ConfigurationError(ForgeError):
    """Startup configuration is missing or invalid (e.g. no API key)."""
