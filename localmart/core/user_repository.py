# localmart/core/user_repository.py
from ..models import User
from ..extensions import db


class UserRepository:
    def find_by_email(self, email):
        """根據 Email 尋找使用者"""
        return User.query.filter_by(email=email).first()

    def find_by_id(self, user_id):
        """根據 ID 尋找使用者"""
        return db.session.get(User, user_id)

    def add(self, user):
        """新增使用者到 session"""
        db.session.add(user)

    def commit(self):
        """提交 session 變更"""
        db.session.commit()
