"""
JSON error handling shared by every API view.

Helpers raise ``ApiError`` and the ``api_view`` decorator turns it into a
``{"error": ...}`` JsonResponse with the matching status code, so view
bodies can bail out from any depth.
"""

import json
import logging
import uuid
from functools import wraps

from django.http import Http404, JsonResponse
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """An error that should be reported to the client as-is."""

    def __init__(self, message, status=400):
        super().__init__(message)
        self.message = message
        self.status = status

    def as_response(self):
        return JsonResponse({"error": self.message}, status=self.status)


def api_view(methods, auth=None):
    """
    Decorate a JSON view.

    Args:
        methods: allowed HTTP methods, e.g. ["GET", "POST"]
        auth: None for open endpoints, "user" to require a session,
              "moderator" or "admin" to also require that role.
              A dict maps a method to its own requirement, e.g.
              {"POST": "user"} leaves GET open.

    Missing session -> 401, wrong role -> 403, wrong method -> 405.
    """
    allowed = [m.upper() for m in methods]

    def decorator(view):
        @csrf_exempt
        @wraps(view)
        def wrapper(request, *args, **kwargs):
            if request.method not in allowed:
                response = JsonResponse({"error": f"{request.method} not allowed"}, status=405)
                response['Allow'] = ', '.join(allowed)
                return response

            required = auth.get(request.method) if isinstance(auth, dict) else auth
            if required:
                if not request.user.is_authenticated:
                    return JsonResponse({"error": "Authentication required"}, status=401)
                if required == 'moderator' and not request.user.is_moderator:
                    return JsonResponse({"error": "Moderator access required"}, status=403)
                if required == 'admin' and not request.user.is_admin_role:
                    return JsonResponse({"error": "Admin access required"}, status=403)

            try:
                return view(request, *args, **kwargs)
            except ApiError as e:
                return e.as_response()
            except Http404 as e:
                return JsonResponse({"error": str(e) or "Not found"}, status=404)
        return wrapper
    return decorator


def parse_json(request):
    """Decode a JSON request body into a dict. An empty body is ``{}``."""
    if not request.body:
        return {}
    try:
        data = json.loads(request.body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ApiError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ApiError("JSON body must be an object")
    return data


def parse_uuid(value, field):
    """Validate an identifier, raising a 400 that names the bad field."""
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        raise ApiError(f"Invalid {field} format: '{value}'. Expected UUID.")


def parse_int(value, field, default, minimum=0, maximum=None):
    if value in (None, ''):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ApiError(f"{field} must be an integer")
    if number < minimum:
        raise ApiError(f"{field} must be >= {minimum}")
    if maximum is not None:
        number = min(number, maximum)
    return number
