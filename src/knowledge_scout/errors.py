class ScoutError(RuntimeError):
    pass


class InvalidInputError(ScoutError, ValueError):
    pass


class DocumentNotFoundError(ScoutError, LookupError):
    def __init__(self, doc_id: str) -> None:
        super().__init__(f"Document not found: {doc_id}")
        self.doc_id = doc_id


class AccessDeniedError(ScoutError, PermissionError):
    def __init__(self, doc_id: str) -> None:
        super().__init__(f"Access denied to document: {doc_id}")
        self.doc_id = doc_id


class AuthenticationRequiredError(ScoutError):
    pass
