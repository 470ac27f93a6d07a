"""
View state for the mobile login flow.

Each screen is a small controller a UI layer binds to: it holds the state the
widgets render and turns user actions into a Banner to show, a Route to
navigate to, or both. Nothing here draws anything.
"""
import enum
from dataclasses import dataclass, field
from typing import Optional

from client.api import AuthAPI, NetworkError


class UserType(enum.Enum):
    """Role toggle on the login screen. View state only; the backend never sees it."""

    STUDENT = "Student"
    FACULTY = "Faculty"


@dataclass
class Banner:
    message: str
    kind: str = "info"  # info | success | error


@dataclass
class Route:
    name: str
    params: dict = field(default_factory=dict)
    replace: bool = False


@dataclass
class ScreenResult:
    banner: Optional[Banner] = None
    route: Optional[Route] = None
    close_dialog: bool = False


def _server_error(response, fallback: str) -> Banner:
    return Banner(f"Error: {response.error or fallback}", "error")


def _network_error(exc: NetworkError) -> Banner:
    return Banner(f"Network error: {exc}", "error")


class LoginScreen:
    def __init__(self):
        self.user_type = UserType.STUDENT

    def select_user_type(self, user_type: UserType):
        self.user_type = user_type

    @property
    def title(self) -> str:
        return f"{self.user_type.value} Login"

    @property
    def shows_sign_in_link(self) -> bool:
        return self.user_type is UserType.STUDENT

    def submit(self, reg_no: str, phone: str) -> ScreenResult:
        if not reg_no or not phone:
            return ScreenResult(banner=Banner("Please fill all fields"))
        return ScreenResult(
            route=Route("pin", {"user_type": self.user_type, "username": reg_no}),
        )


class ResetPasswordDialog:
    def __init__(self, api: AuthAPI):
        self.api = api

    def submit(self, reg_no: str, phone: str, new_password: str, confirm_password: str) -> ScreenResult:
        reg_no = reg_no.strip()
        phone = phone.strip()
        if not (reg_no and phone and new_password and confirm_password):
            return ScreenResult(banner=Banner("All fields are required"))
        if new_password != confirm_password:
            return ScreenResult(banner=Banner("Passwords do not match"))

        try:
            response = self.api.reset_password(reg_no, phone, new_password)
        except NetworkError as e:
            return ScreenResult(banner=_network_error(e))

        if response.ok:
            return ScreenResult(
                banner=Banner("Password reset successfully. Please login.", "success"),
                close_dialog=True,
            )
        return ScreenResult(banner=_server_error(response, "Verification failed"))


class PinScreen:
    """PIN entry. No attempt limit: every failure leaves the screen ready to retry."""

    def __init__(self, api: AuthAPI, user_type: UserType, username: str):
        self.api = api
        self.user_type = user_type
        self.username = username
        self.loading = False

    @property
    def can_submit(self) -> bool:
        return not self.loading

    def verify(self, pin: str) -> ScreenResult:
        pin = pin.strip()
        if len(pin) != 4 or not (pin.isascii() and pin.isdigit()):
            return ScreenResult(banner=Banner("Enter a valid 4-digit PIN"))

        self.loading = True
        try:
            response = self.api.verify_pin(self.username, pin)
        except NetworkError as e:
            return ScreenResult(banner=_network_error(e))
        finally:
            self.loading = False

        if response.ok:
            return ScreenResult(
                route=Route(
                    "dashboard",
                    {"user_type": self.user_type, "username": self.username},
                    replace=True,
                ),
            )
        return ScreenResult(banner=_server_error(response, "Invalid PIN"))
