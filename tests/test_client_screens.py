from client.api import ApiResponse, NetworkError
from client.screens import LoginScreen, PinScreen, ResetPasswordDialog, UserType


class FakeAPI:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []
        self.screen = None
        self.loading_during_call = None

    def _answer(self, *args):
        self.calls.append(args)
        if self.screen is not None:
            self.loading_during_call = self.screen.loading
        if self.exc:
            raise self.exc
        return self.response

    def reset_password(self, reg_no, phone, new_password):
        return self._answer(reg_no, phone, new_password)

    def verify_pin(self, reg_no, pin):
        return self._answer(reg_no, pin)


# ----------------------------------------
# Login screen
# ----------------------------------------
def test_login_screen_toggle():
    screen = LoginScreen()
    assert screen.title == "Student Login"
    assert screen.shows_sign_in_link

    screen.select_user_type(UserType.FACULTY)

    assert screen.title == "Faculty Login"
    assert not screen.shows_sign_in_link


def test_login_requires_both_fields():
    result = LoginScreen().submit("21CS-1042", "")

    assert result.route is None
    assert result.banner.message == "Please fill all fields"


def test_login_moves_to_pin_screen():
    screen = LoginScreen()
    screen.select_user_type(UserType.FACULTY)

    result = screen.submit("21CS-1042", "9876543210")

    assert result.banner is None
    assert result.route.name == "pin"
    assert result.route.params == {"user_type": UserType.FACULTY, "username": "21CS-1042"}
    assert not result.route.replace


# ----------------------------------------
# Reset-password dialog
# ----------------------------------------
def test_reset_requires_all_fields():
    api = FakeAPI()

    result = ResetPasswordDialog(api).submit("  ", "9876543210", "pw1234", "pw1234")

    assert result.banner.message == "All fields are required"
    assert api.calls == []


def test_reset_requires_matching_passwords():
    api = FakeAPI()

    result = ResetPasswordDialog(api).submit("21CS-1042", "9876543210", "pw1234", "pw1235")

    assert result.banner.message == "Passwords do not match"
    assert api.calls == []


def test_reset_success_closes_dialog():
    api = FakeAPI(ApiResponse(200, {"ok": True}))

    result = ResetPasswordDialog(api).submit(" 21CS-1042 ", "9876543210 ", "pw1234", "pw1234")

    assert api.calls == [("21CS-1042", "9876543210", "pw1234")]
    assert result.close_dialog
    assert result.banner.kind == "success"
    assert result.banner.message == "Password reset successfully. Please login."


def test_reset_server_error_keeps_dialog_open():
    api = FakeAPI(ApiResponse(401, {"status": "error", "error": "Verification failed"}))

    result = ResetPasswordDialog(api).submit("21CS-1042", "9876543210", "pw1234", "pw1234")

    assert not result.close_dialog
    assert result.banner.kind == "error"
    assert result.banner.message == "Error: Verification failed"


def test_reset_network_error():
    api = FakeAPI(exc=NetworkError("connection refused"))

    result = ResetPasswordDialog(api).submit("21CS-1042", "9876543210", "pw1234", "pw1234")

    assert result.banner.message == "Network error: connection refused"


# ----------------------------------------
# PIN screen
# ----------------------------------------
def test_pin_must_be_four_digits():
    api = FakeAPI()
    screen = PinScreen(api, UserType.STUDENT, "21CS-1042")

    for pin in ("123", "12345", "12a4", "١٢٣٤"):
        assert screen.verify(pin).banner.message == "Enter a valid 4-digit PIN"
    assert api.calls == []


def test_pin_success_replaces_route_with_dashboard():
    api = FakeAPI(ApiResponse(200, {"ok": True}))
    screen = PinScreen(api, UserType.STUDENT, "21CS-1042")
    api.screen = screen

    result = screen.verify(" 3210 ")

    assert api.calls == [("21CS-1042", "3210")]
    assert api.loading_during_call is True
    assert screen.can_submit
    assert result.route.name == "dashboard"
    assert result.route.replace
    assert result.route.params == {"user_type": UserType.STUDENT, "username": "21CS-1042"}


def test_pin_failure_allows_retry():
    api = FakeAPI(ApiResponse(401, {"status": "error", "error": "Invalid PIN"}))
    screen = PinScreen(api, UserType.STUDENT, "21CS-1042")

    first = screen.verify("0000")
    second = screen.verify("1111")

    assert first.banner.message == second.banner.message == "Error: Invalid PIN"
    assert first.route is None
    assert screen.can_submit
    assert len(api.calls) == 2


def test_pin_failure_without_error_body_uses_fallback():
    api = FakeAPI(ApiResponse(500, {}))

    result = PinScreen(api, UserType.STUDENT, "21CS-1042").verify("3210")

    assert result.banner.message == "Error: Invalid PIN"


def test_pin_network_error_clears_loading():
    api = FakeAPI(exc=NetworkError("timed out"))
    screen = PinScreen(api, UserType.STUDENT, "21CS-1042")

    result = screen.verify("3210")

    assert result.banner.message == "Network error: timed out"
    assert not screen.loading
