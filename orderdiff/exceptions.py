"""Custom exceptions for the orderdiff comparer."""


class OrderDiffError(Exception):
    """Base exception for orderdiff errors."""
    pass


class ConfigurationError(OrderDiffError):
    """Raised when the comparer cannot be configured for a scan."""
    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.message = message
        self.field = field


class KeyExtractionError(OrderDiffError):
    """Raised when an item does not carry the requested key."""
    def __init__(self, key_spec, item, reason: str = None):
        message = f"Cannot extract key {key_spec!r} from item"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.key_spec = key_spec
        self.item = item
        self.reason = reason


class DefinitionError(OrderDiffError):
    """Raised when a comparison definition is invalid."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DefinitionParseError(DefinitionError):
    """Raised when a comparison definition file cannot be parsed."""
    def __init__(self, path: str, reason: str = None):
        super().__init__(
            f"Failed to parse definition file: {path}",
            {"path": path, "reason": reason}
        )
        self.path = path
        self.reason = reason


class KeyOrderingError(OrderDiffError):
    """Raised when two keys cannot be ordered against each other."""
    def __init__(self, left_key, right_key, reason: str = None):
        super().__init__(
            f"Cannot order key {left_key!r} against {right_key!r}"
            + (f": {reason}" if reason else "")
        )
        self.left_key = left_key
        self.right_key = right_key
        self.reason = reason
