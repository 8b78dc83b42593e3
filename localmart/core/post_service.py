# localmart/core/post_service.py
from ..models import CustomerPost
from ..models.models import POST_FULFILLED, ROLE_CUSTOMER
from .errors import InvalidInputError, NotFoundError, PermissionDeniedError
from .post_repository import PostRepository
from .user_repository import UserRepository


class PostService:
    def __init__(self):
        self.post_repo = PostRepository()
        self.user_repo = UserRepository()

    def _require_customer(self, user):
        if not user or user.role != ROLE_CUSTOMER:
            raise PermissionDeniedError("Customer access required.")

    def create_post(self, user, data):
        """建立顧客的需求貼文"""
        self._require_customer(user)
        data = data or {}
        title = (data.get('title') or '').strip()
        if not title:
            raise InvalidInputError("Title is required.")
        description = (data.get('description') or '').strip() or None

        post = CustomerPost(title=title, description=description, customer_id=user.id)
        self.post_repo.add(post)
        self.post_repo.commit()
        return post

    def get_posts(self, user):
        self._require_customer(user)
        return self.post_repo.find_all_by_customer_id(user.id)

    def fulfill_post(self, user, post_id):
        """將需求標記為已完成，只有貼文擁有者可以操作"""
        self._require_customer(user)
        post = self.post_repo.find_by_id(post_id)
        if not post:
            raise NotFoundError("Post not found.")
        if post.customer_id != user.id:
            raise PermissionDeniedError("You do not own this post.")

        post.status = POST_FULFILLED
        self.post_repo.commit()
        return post
