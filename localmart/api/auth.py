# localmart/api/auth.py
from datetime import timedelta

from flask import Blueprint, current_app, jsonify, request
from flasgger import swag_from
from flask_jwt_extended import create_access_token

from ..core.auth_service import login_user, register_user
from .common import handle_service_errors

auth_bp = Blueprint('auth', __name__, url_prefix='/api/v1/auth')


def _issue_token(user):
    expires = timedelta(hours=current_app.config.get('JWT_ACCESS_TOKEN_HOURS', 24))
    access_token = create_access_token(identity=str(user.id), expires_delta=expires)
    return access_token, expires


@auth_bp.route('/register', methods=['POST'])
@swag_from({
    'summary': 'Register a customer or shopkeeper',
    'description': 'Creates a user account and logs it in. Shopkeepers must provide shop name, address and phone.',
    'tags': ['Authentication'],
    'parameters': [
        {
            'name': 'body',
            'in': 'body',
            'required': True,
            'schema': {
                'id': 'Register',
                'required': ['name', 'email', 'password', 'role'],
                'properties': {
                    'name': {'type': 'string', 'example': 'Asha'},
                    'email': {'type': 'string', 'example': 'asha@example.com'},
                    'password': {'type': 'string', 'format': 'password', 'example': 'secret'},
                    'role': {'type': 'string', 'enum': ['CUSTOMER', 'SHOPKEEPER']},
                    'shopName': {'type': 'string', 'example': 'Corner Hardware'},
                    'address': {'type': 'string', 'example': '12 Market Road'},
                    'phone': {'type': 'string', 'example': '0987654321'}
                }
            }
        }
    ],
    'responses': {
        '201': {'description': '註冊成功並自動登入'},
        '400': {'description': '缺少必要欄位'},
        '409': {'description': '使用者已存在'}
    }
})
@handle_service_errors
def handle_register():
    """處理使用者註冊"""
    user = register_user(request.get_json(silent=True))
    access_token, expires = _issue_token(user)

    return jsonify({
        "data": {
            "token": access_token,
            "expires_in": expires.total_seconds(),
            "user": user.to_dict()
        }
    }), 201


@auth_bp.route('/login', methods=['POST'])
@swag_from({
    'summary': 'Email and password login',
    'description': 'Returns a bearer token for the chat and request endpoints.',
    'tags': ['Authentication'],
    'parameters': [
        {
            'name': 'body',
            'in': 'body',
            'required': True,
            'schema': {
                'id': 'Login',
                'required': ['email', 'password'],
                'properties': {
                    'email': {'type': 'string', 'example': 'asha@example.com'},
                    'password': {'type': 'string', 'format': 'password', 'example': 'secret'}
                }
            }
        }
    ],
    'responses': {
        '200': {'description': '登入成功'},
        '401': {'description': '帳號或密碼錯誤'}
    }
})
@handle_service_errors
def handle_login():
    """處理使用者登入"""
    data = request.get_json(silent=True) or {}
    user = login_user(data.get('email'), data.get('password'))

    if not user:
        return jsonify({"error": {"code": "INVALID_CREDENTIALS", "message": "Invalid email or password."}}), 401

    access_token, expires = _issue_token(user)

    return jsonify({
        "data": {
            "token": access_token,
            "expires_in": expires.total_seconds(),
            "user": user.to_dict()
        }
    }), 200
