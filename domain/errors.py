class LedgerError(Exception):
    """Base class for errors raised by the ledger."""


class ValidationError(LedgerError):
    """Raised when user input is rejected; the session state is unchanged."""


class StorageError(LedgerError):
    """Raised by snapshot stores when the underlying driver fails."""
