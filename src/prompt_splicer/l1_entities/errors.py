"""Domain error types."""


class PromptSplicerError(Exception):
    """Base class for all prompt-splicer failures."""


class NotInitializedError(PromptSplicerError):
    """Raised when an AI operation is requested before a provider is configured."""


class ProviderError(PromptSplicerError):
    """Raised on transport, authorization or rate-limit failures from the provider."""


class ProviderTimeoutError(ProviderError):
    """Raised when the provider does not answer within the configured deadline."""


class MalformedResponseError(PromptSplicerError):
    """Raised when the provider answer is empty, unparsable or structurally invalid."""


class TruncatedError(PromptSplicerError):
    """Raised when the provider cut its answer short at the output-length limit."""


class CacheIOError(PromptSplicerError):
    """Storage failure while reading or writing a cached result. Never escapes ResultCache."""


class PersistenceError(PromptSplicerError):
    """Storage failure while saving or loading the session. Never escapes SessionPersistence."""


class SegmentNotFoundError(PromptSplicerError, LookupError):
    """Raised when a segment id does not exist in the current collection."""


class InvalidReorderError(PromptSplicerError, ValueError):
    """Raised when a reorder request is not a permutation of the current segments."""


class OperationBusyError(PromptSplicerError):
    """Raised when an AI operation is requested while another is still outstanding."""


# Kinds that replace AppState.error when they reach the controller.
SURFACED_ERRORS = (NotInitializedError, ProviderError, MalformedResponseError, TruncatedError)
