# localmart/core/post_repository.py
from sqlalchemy import select

from ..models import CustomerPost, ShopResponse
from ..models.models import POST_OPEN
from ..extensions import db


class PostRepository:
    def find_by_id(self, post_id):
        """根據 ID 尋找需求貼文"""
        return db.session.get(CustomerPost, post_id)

    def find_all_by_customer_id(self, customer_id):
        """取得顧客所有的需求貼文，最新的在前"""
        return (
            CustomerPost.query.filter_by(customer_id=customer_id)
            .order_by(CustomerPost.created_at.desc(), CustomerPost.id.desc())
            .all()
        )

    def add(self, post):
        db.session.add(post)

    def commit(self):
        db.session.commit()

    def find_open_unanswered(self, shopkeeper_id):
        """尚未完成、且該店家還沒回覆過的需求，最新的在前"""
        answered = select(ShopResponse.customer_post_id).where(ShopResponse.shopkeeper_id == shopkeeper_id)
        return (
            CustomerPost.query.filter(CustomerPost.status == POST_OPEN, CustomerPost.id.not_in(answered))
            .order_by(CustomerPost.created_at.desc(), CustomerPost.id.desc())
            .all()
        )
