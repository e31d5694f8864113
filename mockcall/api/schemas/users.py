from pydantic import BaseModel


class SignUpRequest(BaseModel):
    uid: str
    name: str
    email: str


class SignUpResponse(BaseModel):
    success: bool
    message: str
