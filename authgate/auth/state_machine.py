"""
Login/signup form state machine.

Holds the active view, the form fields and the status of the current
submission. Submissions go through the identity client; signup runs the
local password checks first and never reaches the network when they fail.

Every submission is tagged with a generation number. Switching views bumps
the generation, so a response that arrives for an abandoned view is dropped
instead of overwriting the state of the view now on screen.
"""
import logging
from typing import Dict, Optional, Tuple

from authgate.core.errors import (
    AuthGateError,
    AuthProviderError,
    InvalidTransition,
    ValidationError,
)
from authgate.core.validation import score_password, validate_password
from authgate.models.auth import AuthView, FormState, PasswordStrength, RequestStatus

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_MESSAGE = "Logged in successfully!"
SIGNUP_SUCCESS_MESSAGE = "Signup successful! Please check your email for verification."
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match."
MISSING_FIELDS_MESSAGE = "Please fill in all required fields."

FIELDS = ("email", "password", "confirm_password", "first_name", "last_name", "phone")
PASSWORD_FIELDS = ("password", "confirm_password")

REQUIRED_FIELDS: Dict[AuthView, Tuple[str, ...]] = {
    AuthView.LOGIN: ("email", "password"),
    AuthView.SIGNUP: ("first_name", "last_name", "phone", "email", "password", "confirm_password"),
}

COPY = {
    AuthView.LOGIN: {
        "title": "Welcome Back",
        "subtitle": "Sign in to continue",
        "submit_label": "Sign In",
        "switch_prompt": "Don't have an account? Sign up",
    },
    AuthView.SIGNUP: {
        "title": "Create Account",
        "subtitle": "Start your secure journey",
        "submit_label": "Create Account",
        "switch_prompt": "Already have an account? Login",
    },
}
PENDING_LABEL = "Processing..."


class AuthStateMachine:
    """
    One instance per form. Not shared between users or requests.

    `client` is any object with async `sign_in(email, password)` and
    `sign_up(email, password, phone, metadata)` returning an AuthResult.
    """

    def __init__(self, client, view: AuthView = AuthView.LOGIN):
        self._client = client
        self.view = view
        self.status = RequestStatus.IDLE
        self.message: Optional[str] = None
        self.failure: Optional[AuthGateError] = None
        self.fields: Dict[str, str] = dict.fromkeys(FIELDS, "")
        self._generation = 0

    @property
    def error(self) -> Optional[str]:
        return self.failure.message if self.failure else None

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def password_strength(self) -> PasswordStrength:
        return score_password(self.fields["password"])

    def set_field(self, name: str, value: str) -> None:
        """Update one field. Status and messages are left alone."""
        if name not in self.fields:
            raise ValueError(f"Unknown form field: {name}")
        self.fields[name] = value

    def update(self, **values: str) -> None:
        for name, value in values.items():
            self.set_field(name, value)

    def switch_view(self) -> AuthView:
        """Toggle login/signup, reset the status and drop any in-flight response."""
        self.view = AuthView.SIGNUP if self.view is AuthView.LOGIN else AuthView.LOGIN
        self.status = RequestStatus.IDLE
        self.message = None
        self.failure = None
        self._generation += 1
        return self.view

    async def submit_login(self) -> RequestStatus:
        self._require_view(AuthView.LOGIN)
        if self._in_flight():
            return self.status

        missing = self._missing_fields()
        if missing:
            return self._fail(ValidationError(MISSING_FIELDS_MESSAGE))

        generation = self._begin()
        try:
            result = await self._client.sign_in(self.fields["email"], self.fields["password"])
        except Exception as e:
            logger.warning("Sign in call failed: %s", e)
            return self._finish(generation, AuthProviderError(str(e)))

        if result.error:
            return self._finish(generation, AuthProviderError(result.error))
        return self._finish(generation, message=LOGIN_SUCCESS_MESSAGE)

    async def submit_signup(self) -> RequestStatus:
        self._require_view(AuthView.SIGNUP)
        if self._in_flight():
            return self.status

        try:
            self._check_signup()
        except ValidationError as e:
            return self._fail(e)

        fields = self.fields
        metadata = {
            "first_name": fields["first_name"],
            "last_name": fields["last_name"],
            "phone": fields["phone"],
        }

        generation = self._begin()
        try:
            result = await self._client.sign_up(
                fields["email"], fields["password"], fields["phone"], metadata
            )
        except Exception as e:
            logger.warning("Sign up call failed: %s", e)
            return self._finish(generation, AuthProviderError(str(e)))

        if result.error:
            return self._finish(generation, AuthProviderError(result.error))
        return self._finish(generation, message=SIGNUP_SUCCESS_MESSAGE)

    async def submit(self) -> RequestStatus:
        """Submit whichever form the current view shows."""
        if self.view is AuthView.LOGIN:
            return await self.submit_login()
        return await self.submit_signup()

    def snapshot(self) -> FormState:
        copy = COPY[self.view]
        pending = self.status is RequestStatus.PENDING
        return FormState(
            view=self.view,
            status=self.status,
            message=self.message,
            error=self.error,
            strength=self.password_strength,
            title=copy["title"],
            subtitle=copy["subtitle"],
            submit_label=PENDING_LABEL if pending else copy["submit_label"],
            submit_disabled=pending,
            switch_prompt=copy["switch_prompt"],
            required_fields=list(REQUIRED_FIELDS[self.view]),
        )

    def _check_signup(self) -> None:
        if self._missing_fields():
            raise ValidationError(MISSING_FIELDS_MESSAGE)

        password = self.fields["password"]
        problem = validate_password(password)
        if problem:
            raise ValidationError(problem)
        if password != self.fields["confirm_password"]:
            raise ValidationError(PASSWORD_MISMATCH_MESSAGE)

    def _missing_fields(self):
        # Passwords are taken as typed; whitespace counts
        missing = []
        for name in REQUIRED_FIELDS[self.view]:
            value = self.fields[name]
            if name in PASSWORD_FIELDS:
                blank = not value
            else:
                blank = not value.strip()
            if blank:
                missing.append(name)
        return missing

    def _require_view(self, view: AuthView) -> None:
        if self.view is not view:
            raise InvalidTransition(f"Cannot submit {view.value} from the {self.view.value} view")

    def _in_flight(self) -> bool:
        if self.status is RequestStatus.PENDING:
            logger.debug("Submission already pending for %s view, ignoring", self.view.value)
            return True
        return False

    def _begin(self) -> int:
        self._generation += 1
        self.status = RequestStatus.PENDING
        self.message = None
        self.failure = None
        return self._generation

    def _fail(self, failure: AuthGateError) -> RequestStatus:
        # Local failures skip the pending state entirely
        self.message = None
        self.failure = failure
        self.status = RequestStatus.FAILED
        return self.status

    def _finish(
        self,
        generation: int,
        failure: Optional[AuthGateError] = None,
        message: Optional[str] = None,
    ) -> RequestStatus:
        if generation != self._generation:
            logger.info(
                "Discarding stale response for attempt %s (current attempt %s)",
                generation,
                self._generation,
            )
            return self.status

        if failure is not None:
            self.failure = failure
            self.status = RequestStatus.FAILED
        else:
            self.message = message
            self.status = RequestStatus.SUCCEEDED
        return self.status
