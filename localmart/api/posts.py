# localmart/api/posts.py
from flask import Blueprint, jsonify, request
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from ..core.post_service import PostService
from ..utils.dependencies import container
from .common import get_current_user, handle_service_errors

posts_bp = Blueprint('posts', __name__, url_prefix='/api/v1/customer/posts')


@posts_bp.route('', methods=['POST'])
@jwt_required()
@swag_from({
    'summary': '建立需求貼文',
    'description': 'A customer posts an "I need X" request that nearby shopkeepers can answer.',
    'tags': ['Requests'],
    'security': [{'bearerAuth': []}],
    'parameters': [
        {
            'name': 'body',
            'in': 'body',
            'required': True,
            'schema': {
                'id': 'NewPost',
                'required': ['title'],
                'properties': {
                    'title': {'type': 'string', 'example': 'Need a 10mm wrench'},
                    'description': {'type': 'string', 'example': 'Today before 6pm'}
                }
            }
        }
    ],
    'responses': {
        '201': {'description': '建立成功'},
        '400': {'description': '缺少標題'},
        '401': {'description': 'Token 無效或未提供'},
        '403': {'description': '只有顧客可以建立需求'}
    }
})
@handle_service_errors
def create_post():
    """建立需求貼文"""
    user = get_current_user()
    post = container.resolve(PostService).create_post(user, request.get_json(silent=True))
    return jsonify({"data": post.to_dict()}), 201


@posts_bp.route('', methods=['GET'])
@jwt_required()
@swag_from({
    'summary': '獲取自己的需求貼文',
    'tags': ['Requests'],
    'security': [{'bearerAuth': []}],
    'responses': {
        '200': {'description': '成功獲取需求列表'},
        '401': {'description': 'Token 無效或未提供'},
        '403': {'description': '只有顧客可以查看'}
    }
})
@handle_service_errors
def list_posts():
    user = get_current_user()
    posts = container.resolve(PostService).get_posts(user)
    return jsonify({"data": [post.to_dict() for post in posts]}), 200


@posts_bp.route('/<int:post_id>/fulfill', methods=['PATCH'])
@jwt_required()
@swag_from({
    'summary': '將需求標記為已完成',
    'tags': ['Requests'],
    'security': [{'bearerAuth': []}],
    'parameters': [
        {'name': 'post_id', 'in': 'path', 'type': 'integer', 'required': True, 'description': '需求貼文 ID'}
    ],
    'responses': {
        '200': {'description': '更新成功'},
        '403': {'description': '不是貼文擁有者'},
        '404': {'description': '找不到該貼文'}
    }
})
@handle_service_errors
def fulfill_post(post_id):
    user = get_current_user()
    post = container.resolve(PostService).fulfill_post(user, post_id)
    return jsonify({"data": post.to_dict()}), 200
