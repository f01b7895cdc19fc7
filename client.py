# client.py — Python client for the community center API (cookie session, cached queries, auth state)
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple
import requests

USER_KEY = ("/api/user",)

class ApiError(Exception):
    """Non-2xx answer. str(e) is '<status>: <body text or reason>'."""
    def __init__(self, status: int, text: str, payload: Optional[dict] = None):
        super().__init__(f"{status}: {text}")
        self.status = status
        self.text = text
        self.payload = payload or {}

    @property
    def message(self) -> str:
        return self.payload.get("message") or self.text

@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"  # default | destructive

class QueryCache:
    """Query results by key. Entries never go stale and are only replaced by set() or invalidate()."""

    def __init__(self):
        self._data: Dict[Tuple, Any] = {}

    def __contains__(self, key) -> bool:
        return tuple(key) in self._data

    def get(self, key, default=None):
        return self._data.get(tuple(key), default)

    def set(self, key, value):
        self._data[tuple(key)] = value

    def invalidate(self, prefix: str = ""):
        """Drops every entry whose first key part starts with `prefix` (all entries for '')."""
        for key in [k for k in self._data if str(k[0]).startswith(prefix)]:
            del self._data[key]

def _error_from(res: requests.Response) -> ApiError:
    text = res.text or res.reason or ""
    try:
        payload = res.json()
    except ValueError:
        payload = None
    return ApiError(res.status_code, text, payload if isinstance(payload, dict) else None)

class ApiClient:
    def __init__(self, base_url: str = "", session: requests.Session = None,
                 cache: QueryCache = None, timeout: Optional[float] = None):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.cache = cache if cache is not None else QueryCache()
        self.timeout = timeout

    def _url(self, url: str) -> str:
        return url if url.startswith("http") else f"{self.base_url}{url}"

    def request(self, method: str, url: str, body=None, files=None) -> requests.Response:
        """
        One HTTP call, no retry. Plain bodies go as JSON; with `files` the body
        becomes multipart form fields. Cookies stay on the session.
        """
        kwargs = {"timeout": self.timeout}
        if files:
            kwargs["files"] = files
            if body:
                kwargs["data"] = body
        elif body is not None:
            kwargs["json"] = body
            kwargs["headers"] = {"Content-Type": "application/json"}
        return self.session.request(method.upper(), self._url(url), **kwargs)

    def get_query(self, key, on401: str = "throw", select: Callable = None):
        """
        GET key[0], served from the cache when present. on401='returnNull'
        turns a 401 into None; any other non-2xx raises ApiError.
        """
        key = tuple(key)
        if key in self.cache:
            return self.cache.get(key)
        res = self.session.get(self._url(key[0]), timeout=self.timeout)
        if on401 == "returnNull" and res.status_code == 401:
            value = None
        elif not res.ok:
            raise _error_from(res)
        else:
            value = res.json()
            if select:
                value = select(value)
        self.cache.set(key, value)
        return value

    def mutate(self, method: str, url: str, body=None, files=None, invalidate: str = None):
        """request() that raises ApiError on failure and optionally invalidates a cache prefix."""
        res = self.request(method, url, body, files)
        if not res.ok:
            raise _error_from(res)
        if invalidate is not None:
            self.cache.invalidate(invalidate)
        return res.json() if res.content else None

class AuthSession:
    """Current user kept under USER_KEY; login/register/logout each make one call."""

    def __init__(self, client: ApiClient):
        self.client = client
        self.notifications: List[Notification] = []
        self.redirect_to: Optional[str] = None
        self.error: Optional[ApiError] = None

    @property
    def user(self) -> Optional[dict]:
        try:
            return self.client.get_query(USER_KEY, on401="returnNull", select=lambda d: d.get("user"))
        except ApiError as e:
            self.error = e
            return None

    @property
    def is_admin(self) -> bool:
        u = self.user
        return bool(u and u.get("role") == "admin")

    def _fail(self, title: str, res: requests.Response, fallback: str):
        err = _error_from(res)
        msg = err.payload.get("message") or fallback
        self.notifications.append(Notification(title, msg, "destructive"))
        self.error = err
        raise err

    def login(self, email: str, password: str) -> dict:
        res = self.client.request("POST", "/api/login", {"email": email, "password": password})
        if not res.ok:
            self._fail("Login failed", res, "Login failed")
        user = res.json()["user"]
        self.client.cache.set(USER_KEY, user)
        self.notifications.append(Notification("Login successful", f"Welcome back, {user['name']}!"))
        self.redirect_to = "/dashboard"
        return user

    def register(self, name: str, email: str, password: str, confirm_password: str = None) -> dict:
        if confirm_password is not None and confirm_password != password:
            msg = "Passwords don't match"
            self.notifications.append(Notification("Registration failed", msg, "destructive"))
            raise ValueError(msg)
        res = self.client.request("POST", "/api/register", {"name": name, "email": email, "password": password})
        if not res.ok:
            self._fail("Registration failed", res, "Registration failed")
        user = res.json()["user"]
        self.client.cache.set(USER_KEY, user)
        self.notifications.append(Notification("Registration successful", f"Welcome, {user['name']}!"))
        self.redirect_to = "/dashboard"
        return user

    def logout(self):
        res = self.client.request("POST", "/api/logout")
        if not res.ok:
            self._fail("Logout failed", res, "Logout failed")
        self.client.cache.set(USER_KEY, None)
        self.notifications.append(Notification("Logged out", "You have been successfully logged out."))
        self.redirect_to = "/"
