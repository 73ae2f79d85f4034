"""Exception hierarchy for docrag."""


class DocragError(Exception):
    """Base class for all docrag errors."""


class ParseError(DocragError):
    """A block of a source document could not be parsed.

    Recovered by skipping the block, never the whole document.
    """

    def __init__(self, message: str, line_number: int | None = None):
        super().__init__(message)
        self.line_number = line_number


class EmbeddingUnavailable(DocragError):
    """The embedding backend is unreachable or replied with malformed output."""


class LLMUnavailable(DocragError):
    """The chat backend is unreachable or replied with malformed output."""


class StoreIOError(DocragError):
    """A snapshot or history file could not be read or written."""


class InitializationError(DocragError):
    """Cold initialization failed as a whole.

    The cause (usually an EmbeddingUnavailable) is chained via __cause__.
    """
