from pydantic import BaseModel


class VerificationCodeSent(BaseModel):
    message: str
    email: str
    expires_in_minutes: int


class ChangePasswordRequest(BaseModel):
    verification_code: str
    current_password: str
    new_password: str
    confirm_password: str
