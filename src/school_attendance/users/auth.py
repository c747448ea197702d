from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import g, jsonify, session

from ..core.exceptions import AuthenticationError
from .service import IdentityResolver


def make_roles_required(resolver: IdentityResolver) -> Callable:
    """Build a decorator factory that only lets the given caller types through.

    The identity provider stores the signed-in user id in the Flask session;
    the resolved caller is exposed to the view as ``g.caller``.
    """

    def roles_required(*allowed: type):
        def decorator(view):
            @wraps(view)
            def wrapper(*args, **kwargs):
                try:
                    caller = resolver.resolve(session.get("user_id"))
                except AuthenticationError as e:
                    return jsonify({"success": False, "error": str(e)}), 401

                if not isinstance(caller, allowed):
                    return jsonify({"success": False, "error": "Insufficient permissions"}), 403

                g.caller = caller
                return view(*args, **kwargs)

            return wrapper

        return decorator

    return roles_required
