from fastapi import status

from cable_iam.libs.result import Error

# Business error codes -> HTTP status. Anything unlisted is a server error.
ERROR_STATUS = {
    "VALIDATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "INVALID_OR_EXPIRED": status.HTTP_400_BAD_REQUEST,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "UNAUTHORIZED": status.HTTP_403_FORBIDDEN,
    "OUT_OF_SCOPE": status.HTTP_403_FORBIDDEN,
    "CANNOT_MODIFY_SELF": status.HTTP_403_FORBIDDEN,
    "CANNOT_REMOVE_SITE_ACCESS": status.HTTP_403_FORBIDDEN,
    "CANNOT_DEMOTE_SITE_ADMIN": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "SITE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVITATION_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "USER_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "INVITATION_ALREADY_PENDING": status.HTTP_409_CONFLICT,
    "SETUP_ALREADY_COMPLETED": status.HTTP_409_CONFLICT,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Raise the HTTP exception matching a use case error."""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)
