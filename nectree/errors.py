class NecTreeError(Exception):
    """Base class for errors raised by the link service."""


class DecodeError(NecTreeError):
    """POST body is absent or is not a Save/Delete operation."""


class EnvelopeError(NecTreeError):
    """Inbound message could not be read as an HTTP request envelope."""


class PersistenceError(NecTreeError):
    """Writing the state blob or the HTML page failed."""


class StateDecodeError(PersistenceError):
    """Stored state blob could not be turned back into a link tree."""
