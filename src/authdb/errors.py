class StorageOpenError(Exception):
    """Raised when the SQLite file backing the auth database cannot be opened.

    The driver exception is chained as ``__cause__`` and its message is kept
    in the error text.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open database at {path}: {reason}")
