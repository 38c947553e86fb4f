"""
Route guards.

A guard is a plain function taking the current request. It either aborts the
request or returns a dict of keyword arguments for the view. use_guards()
runs a route's guards in order, so what a route requires is visible at the
route itself:

    @bp.get("/search")
    @use_guards(jwt_auth)
    def search(current_user): ...
"""
from __future__ import annotations

from functools import wraps
from typing import Any, Callable, Dict, Optional

import jwt
from flask import Request, abort, current_app, request

from models import storage
from models.user import User
from utils.security import verify_token

Guard = Callable[[Request], Optional[Dict[str, Any]]]


def use_guards(*guards: Guard):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            for guard in guards:
                kwargs.update(guard(request) or {})
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def jwt_auth(req: Request) -> Dict[str, Any]:
    """Require a valid Bearer access token; hands the user to the view as current_user."""
    auth = req.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        abort(401, description="Missing or invalid Authorization header")
    token = auth.split(" ", 1)[1].strip()
    try:
        decoded = verify_token(token, current_app.config["JWT_SECRET"])
    except jwt.ExpiredSignatureError:
        abort(401, description="Token expired")
    except jwt.InvalidTokenError:
        abort(401, description="Invalid token")

    try:
        user_id = int(decoded.get("sub"))
    except (TypeError, ValueError):
        abort(401, description="Invalid token")

    user = storage.get(User, user_id)
    if not user:
        abort(401, description="User not found")
    return {"current_user": user}
