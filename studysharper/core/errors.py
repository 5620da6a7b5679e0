from typing import Optional


class ApiError(Exception):
    """
    Erreur levée par le client quand le backend (ou le proxy) répond en échec.
    """

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return self.message


class RequestAborted(ApiError):
    """La requête a été annulée via un CancelToken."""

    def __init__(self, message: str = "Request aborted"):
        super().__init__(message, status=None)
