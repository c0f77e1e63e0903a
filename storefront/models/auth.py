"""Account forms"""

from pydantic import BaseModel, EmailStr, Field


class FormModel(BaseModel):

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class LoginForm(FormModel):
    email: EmailStr
    password: str = Field(min_length=8)


class RegisterForm(FormModel):
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=8)


class ForgotPasswordForm(FormModel):
    email: EmailStr


class ResetPasswordForm(FormModel):
    code: str = Field(min_length=1)
    password: str = Field(min_length=8)
    password_confirmation: str = Field(alias="passwordConfirmation", min_length=8)


class ChangePasswordForm(FormModel):
    current_password: str = Field(alias="currentPassword", min_length=1)
    password: str = Field(min_length=8)
    password_confirmation: str = Field(alias="passwordConfirmation", min_length=8)


class ChangeUsernameForm(FormModel):
    username: str = Field(min_length=3)
