# localmart/core/response_service.py
import logging

from sqlalchemy.exc import IntegrityError

from ..models import ShopResponse
from ..models.models import POST_OPEN, ROLE_CUSTOMER, ROLE_SHOPKEEPER
from .errors import ConflictError, InvalidInputError, NotFoundError, PermissionDeniedError
from .post_repository import PostRepository
from .response_repository import ResponseRepository
from .validators import require_id

logger = logging.getLogger(__name__)


def _image_urls(value):
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(url, str) and url.strip() for url in value):
        raise InvalidInputError("'imageUrls' must be a list of URLs.")
    return [url.strip() for url in value]


class ResponseService:
    def __init__(self):
        self.post_repo = PostRepository()
        self.response_repo = ResponseRepository()

    def _require_role(self, user, role, message):
        if not user or user.role != role:
            raise PermissionDeniedError(message)

    def respond(self, user, data):
        """
        店家回覆顧客的需求。

        A shopkeeper answers each request at most once; a second answer is a
        ConflictError. Only open requests can be answered.
        """
        self._require_role(user, ROLE_SHOPKEEPER, "Shopkeeper access required.")
        data = data or {}
        post_id = require_id(data.get('customerPostId'), "customerPostId")
        is_available = data.get('isAvailable')
        if not isinstance(is_available, bool):
            raise InvalidInputError("'isAvailable' must be true or false.")
        message = (data.get('message') or '').strip() or None
        image_urls = _image_urls(data.get('imageUrls'))

        post = self.post_repo.find_by_id(post_id)
        if not post:
            raise NotFoundError("Request not found.")
        if post.status != POST_OPEN:
            raise InvalidInputError("This request is no longer open.")
        if self.response_repo.find_by_pair(post.id, user.id):
            raise ConflictError("You have already responded to this request.")

        response = ShopResponse(
            customer_post_id=post.id,
            shopkeeper_id=user.id,
            is_available=is_available,
            message=message,
            image_urls=image_urls,
        )
        try:
            self.response_repo.add(response)
            self.response_repo.commit()
        except IntegrityError:
            self.response_repo.rollback()
            raise ConflictError("You have already responded to this request.")

        logger.info(f"Shopkeeper {user.id} responded to request {post.id} (available={is_available}).")
        return response

    def get_responses(self, user):
        """顧客查看自己需求收到的所有回覆"""
        self._require_role(user, ROLE_CUSTOMER, "Customer access required.")
        return self.response_repo.find_all_for_customer(user.id)

    def get_open_requests(self, user):
        """店家查看還沒回覆過的開放需求"""
        self._require_role(user, ROLE_SHOPKEEPER, "Shopkeeper access required.")
        return self.post_repo.find_open_unanswered(user.id)
