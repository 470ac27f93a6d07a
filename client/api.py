import os
from typing import Optional
import requests

DEFAULT_BASE_URL = "http://localhost:4000"


class NetworkError(Exception):
    """Raised when the backend could not be reached at all."""


class ApiResponse:
    def __init__(self, status_code: int, body: dict):
        self.status_code = status_code
        self.body = body

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @property
    def error(self):
        return self.body.get("error")


class AuthAPI:
    """
    HTTP client for the /auth endpoints.

    One request per call, no retries. ``timeout`` defaults to None, which
    leaves requests waiting for as long as the server takes.
    """

    def __init__(self, base_url: Optional[str] = None, session=None, timeout: Optional[float] = None):
        self.base_url = (base_url or os.getenv("ATTENDANCE_API_URL", DEFAULT_BASE_URL)).rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, payload: dict) -> ApiResponse:
        try:
            r = self.session.post(f"{self.base_url}/auth/{path}", json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(str(e)) from e
        try:
            body = r.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        return ApiResponse(r.status_code, body)

    def register(self, email: str, password: str, role: str = "STUDENT", student=None, faculty=None) -> ApiResponse:
        payload = {"email": email, "password": password, "role": role}
        if student is not None:
            payload["student"] = student
        if faculty is not None:
            payload["faculty"] = faculty
        return self._post("register", payload)

    def login_with_email(self, email: str, password: str) -> ApiResponse:
        return self._post("login", {"email": email, "password": password})

    def login_with_reg_no(self, reg_no: str, phone: str) -> ApiResponse:
        return self._post("login", {"regNo": reg_no, "phone": phone})

    def reset_password(self, reg_no: str, phone: str, new_password: str) -> ApiResponse:
        return self._post("reset-password", {"regNo": reg_no, "phone": phone, "newPassword": new_password})

    def verify_pin(self, reg_no: str, pin: str) -> ApiResponse:
        return self._post("verify-pin", {"regNo": reg_no, "pin": pin})

    def refresh(self, refresh_token: str) -> ApiResponse:
        return self._post("refresh", {"refreshToken": refresh_token})
