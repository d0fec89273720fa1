from typing import Dict, Optional

from fastapi import status
from libs.result import Error


class ClientError(Exception):
    """Error the caller can fix; rendered with its code, message and details"""

    def __init__(
        self,
        base_error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.base_error = base_error
        self.status_code = status_code
        self.headers = headers
        super().__init__(base_error.message)


class ServerError(Exception):
    """Unexpected failure; only the code reaches the caller"""

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)
