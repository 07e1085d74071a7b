"""Custom exceptions for tasktree services."""


class DocumentClosedError(Exception):
    """Raised when a document is read or written after it was closed.

    Attributes:
        doc_id: Identifier of the closed document
        message: Human-readable error message
    """

    def __init__(self, doc_id: str, message: str = "Document is closed"):
        """Initialize DocumentClosedError.

        Args:
            doc_id: Identifier of the closed document
            message: Human-readable error message
        """
        self.doc_id = doc_id
        self.message = message
        super().__init__(f"{message}: {doc_id}")
