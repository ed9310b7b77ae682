class CsvChatError(Exception):
    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(CsvChatError):
    """Requested resource does not exist."""


class ConflictError(CsvChatError):
    """Operation conflicts with existing state (e.g. re-ingesting a table)."""


class InvalidInputError(CsvChatError):
    """Caller supplied input the pipeline cannot act on."""


class StoreNotReadyError(CsvChatError):
    """Store used before initialization finished (or after it failed)."""


class StoreInitError(CsvChatError):
    """Embedded store could not be created; fatal for the session."""


class IngestError(CsvChatError):
    """Rows could not be materialized; the insert transaction was rolled back."""


class LLMTransportError(CsvChatError):
    """Model endpoint unreachable, timed out or answered with a non-2xx status."""


class QueryError(CsvChatError):
    """The store rejected a statement (syntax, unknown table/column, ...)."""
