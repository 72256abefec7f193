"""
Pydantic models for the authentication form, the identity provider results
and the protected API responses.
"""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, computed_field


class AuthView(str, Enum):
    LOGIN = "login"
    SIGNUP = "signup"


class RequestStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class PasswordStrength(BaseModel):
    """Derived strength of the password currently typed in the form."""
    score: int = Field(..., ge=0, le=6, description="Number of satisfied predicates")
    label: str = Field(..., description="Weak, Medium or Strong")
    color: str = Field(..., description="Hex color hint for the strength meter")

    @computed_field
    @property
    def percent(self) -> float:
        """Fill width of the strength bar."""
        return self.score / 6 * 100


class SignInRequest(BaseModel):
    """Request to sign in with email and password."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class SignUpRequest(BaseModel):
    """Request to create an account. Password rules are checked by the form."""
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")
    confirm_password: str = Field(..., description="Must equal password")
    first_name: str = Field(..., description="User's first name")
    last_name: str = Field(..., description="User's last name")
    phone: str = Field(..., description="User's phone number")


class PasswordCheckRequest(BaseModel):
    password: str = ""


class PasswordCheckResponse(BaseModel):
    strength: PasswordStrength
    error: Optional[str] = Field(None, description="First failing composition rule, if any")


class FormState(BaseModel):
    """What the login/signup form shows for the current state."""
    view: AuthView
    status: RequestStatus
    message: Optional[str] = None
    error: Optional[str] = None
    strength: PasswordStrength
    title: str
    subtitle: str
    submit_label: str
    submit_disabled: bool = False
    switch_prompt: str
    required_fields: List[str] = Field(default_factory=list)


class AuthResult(BaseModel):
    """Outcome of a sign-in or sign-up call against the identity provider."""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Introspection(BaseModel):
    """Outcome of a token introspection call."""
    user: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class ProtectedResponse(BaseModel):
    message: str
    user: Dict[str, Any]


class ErrorResponse(BaseModel):
    error: str
