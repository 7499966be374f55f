"""
Account schemas.
"""

from pydantic import BaseModel

from .common import RequestBody, SuccessResponse


class CredentialsRequest(RequestBody):
    email: str = ""
    password: str = ""


class UserData(BaseModel):
    user_id: int
    email: str
    address: str


class AuthData(UserData):
    token: str


class AuthResponse(SuccessResponse):
    data: AuthData


class UserResponse(SuccessResponse):
    data: UserData
