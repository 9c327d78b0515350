"""
Inquilex Errors
Exception hierarchy for corpus and configuration loading
"""


class InquilexError(Exception):
    """Base exception for all Inquilex errors"""

    pass


class CorpusError(InquilexError):
    """
    Raised when a corpus asset cannot be loaded or has the wrong shape

    Attributes:
        key: Corpus key that caused the error (None for file-level errors)
        message: Human-readable description
    """

    def __init__(self, message: str, key: str = None):
        self.key = key
        self.message = message
        if key is not None:
            super().__init__(f"Corpus entry '{key}': {message}")
        else:
            super().__init__(message)


class ConfigError(InquilexError):
    """Raised when a configuration file cannot be read or parsed"""

    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Failed to load config from {path}: {message}")
