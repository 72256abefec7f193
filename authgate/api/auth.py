"""
Form endpoints: each request drives a fresh AuthStateMachine for one
submission and returns what the form should show afterwards.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from authgate.auth.dependencies import get_identity_client
from authgate.auth.state_machine import AuthStateMachine
from authgate.connectors.supabase import IdentityClient
from authgate.core.errors import AuthProviderError, ValidationError
from authgate.core.validation import score_password, validate_password
from authgate.models.auth import (
    AuthView,
    FormState,
    PasswordCheckRequest,
    PasswordCheckResponse,
    SignInRequest,
    SignUpRequest,
)

router = APIRouter()
logger = logging.getLogger(__name__)


def _form_response(form: AuthStateMachine, provider_status: int) -> JSONResponse:
    state = form.snapshot()
    if isinstance(form.failure, ValidationError):
        status_code = 400
    elif isinstance(form.failure, AuthProviderError):
        status_code = provider_status
    else:
        status_code = 200
    return JSONResponse(status_code=status_code, content=state.model_dump(mode="json"))


@router.post("/signin", response_model=FormState)
async def signin(request: SignInRequest, client: IdentityClient = Depends(get_identity_client)):
    """
    Sign in with email and password.

    Provider rejections come back as 401 with the provider's text in `error`.
    """
    form = AuthStateMachine(client, view=AuthView.LOGIN)
    form.update(email=request.email, password=request.password)
    await form.submit_login()
    logger.debug("Sign in for %s finished with %s", request.email, form.status.value)
    return _form_response(form, provider_status=401)


@router.post("/signup", response_model=FormState)
async def signup(request: SignUpRequest, client: IdentityClient = Depends(get_identity_client)):
    """
    Create an account.

    Password composition and confirmation are checked locally first and a
    failure there returns 400 without contacting the identity provider.
    """
    form = AuthStateMachine(client, view=AuthView.SIGNUP)
    form.update(**request.model_dump())
    await form.submit_signup()
    logger.debug("Sign up for %s finished with %s", request.email, form.status.value)
    return _form_response(form, provider_status=400)


@router.post("/password-strength", response_model=PasswordCheckResponse)
async def password_strength(request: PasswordCheckRequest):
    return PasswordCheckResponse(
        strength=score_password(request.password),
        error=validate_password(request.password),
    )
