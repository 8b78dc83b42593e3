# localmart/api/common.py
import logging
from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt_identity
from sqlalchemy.exc import OperationalError

from ..core.errors import ServiceError, TransientError, UnauthorizedError
from ..core.user_repository import UserRepository
from ..extensions import db


def error_response(error):
    return jsonify(error.to_dict()), error.status_code


def get_current_user():
    """Resolves the token subject to a user; a token for a deleted user is unauthorized."""
    identity = get_jwt_identity()
    try:
        user_id = int(identity)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid token identity.")
    user = UserRepository().find_by_id(user_id)
    if user is None:
        raise UnauthorizedError("User for this token no longer exists.")
    return user


def handle_service_errors(view):
    """Turns every failure of a view into the JSON error envelope."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except ServiceError as e:
            db.session.rollback()
            return error_response(e)
        except OperationalError as e:
            db.session.rollback()
            logging.error(f"Database unavailable in {view.__name__}: {e}", exc_info=True)
            return error_response(TransientError())
        except Exception as e:
            db.session.rollback()
            logging.error(f"Unexpected error in {view.__name__}: {e}", exc_info=True)
            return jsonify({"error": {"code": "INTERNAL_SERVER_ERROR", "message": "An unexpected error occurred."}}), 500
    return wrapper
