# localmart/core/response_repository.py
from ..models import CustomerPost, ShopResponse
from ..extensions import db


class ResponseRepository:
    def find_by_pair(self, post_id, shopkeeper_id):
        """同一位店家對同一則需求只會有一筆回覆"""
        return ShopResponse.query.filter_by(customer_post_id=post_id, shopkeeper_id=shopkeeper_id).first()

    def find_all_for_customer(self, customer_id):
        """顧客所有需求收到的回覆，最新的在前"""
        return (
            ShopResponse.query.join(CustomerPost, ShopResponse.customer_post_id == CustomerPost.id)
            .filter(CustomerPost.customer_id == customer_id)
            .order_by(ShopResponse.created_at.desc(), ShopResponse.id.desc())
            .all()
        )

    def add(self, response):
        db.session.add(response)

    def commit(self):
        db.session.commit()

    def rollback(self):
        db.session.rollback()
