"""
Error taxonomy shared by all services.

Each error is an HTTPException so services can raise it directly and the
routes surface it unchanged. NotFoundOrUnauthorized covers both
"does not exist" and "not yours".
"""
from fastapi import HTTPException, status


class Unauthorized(HTTPException):
    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotFoundOrUnauthorized(HTTPException):
    def __init__(self, detail: str = "Not found or unauthorized"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class InviteNotValid(HTTPException):
    def __init__(self, detail: str = "Invite not valid"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class ValidationError(HTTPException):
    def __init__(self, detail: str = "Invalid input"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)
