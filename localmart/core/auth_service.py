# localmart/core/auth_service.py
from ..models import User
from ..models.models import ROLES, ROLE_SHOPKEEPER
from .errors import ConflictError, InvalidInputError
from .user_repository import UserRepository


def login_user(email, password):
    """驗證帳號密碼，成功時回傳使用者，否則回傳 None"""
    if not email or not password:
        return None
    user = UserRepository().find_by_email(email.strip().lower())
    if user and user.check_password(password):
        return user
    return None


def register_user(data):
    """
    建立新使用者。

    Shopkeepers must also provide their shop name, address and phone.
    Raises InvalidInputError for missing fields and ConflictError when the
    email is already registered.
    """
    data = data or {}
    name = (data.get('name') or '').strip()
    email = (data.get('email') or '').strip().lower()
    password = data.get('password')
    role = (data.get('role') or '').strip().upper()

    if not name or not email or not password or not role:
        raise InvalidInputError("Missing required fields (name, email, password, role).")
    if role not in ROLES:
        raise InvalidInputError(f"'role' must be one of {', '.join(ROLES)}.")

    shop_name = (data.get('shopName') or data.get('shop_name') or '').strip()
    address = (data.get('address') or '').strip()
    phone = (data.get('phone') or '').strip()
    if role == ROLE_SHOPKEEPER and (not shop_name or not address or not phone):
        raise InvalidInputError("Shop name, address, and phone are required for shopkeepers.")

    repo = UserRepository()
    if repo.find_by_email(email):
        raise ConflictError("User with this email already exists.")

    user = User(
        name=name,
        email=email,
        role=role,
        shop_name=shop_name if role == ROLE_SHOPKEEPER else None,
        address=address if role == ROLE_SHOPKEEPER else None,
        phone=phone if role == ROLE_SHOPKEEPER else None,
    )
    user.set_password(password)
    repo.add(user)
    repo.commit()
    return user
