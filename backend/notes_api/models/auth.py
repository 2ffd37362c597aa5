from pydantic import BaseModel


# Length and charset rules live in the signup flow so that violations map to
# the same 400 validation_error as every other rejected input.
class SignupRequest(BaseModel):
    username: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class AccountOut(BaseModel):
    id: str
    username: str


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
