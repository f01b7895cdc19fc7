# extensions.py — shared extension instances
# One SQLAlchemy and one Limiter for the whole app, to avoid "multiple binds" and import loops.
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
limiter = Limiter(key_func=get_remote_address)

__all__ = ["db", "limiter"]
