# localmart/api/responses.py
from flask import Blueprint, jsonify, request
from flasgger import swag_from
from flask_jwt_extended import jwt_required

from ..core.response_service import ResponseService
from ..utils.dependencies import container
from .common import get_current_user, handle_service_errors

responses_bp = Blueprint('responses', __name__, url_prefix='/api/v1')


@responses_bp.route('/shopkeeper/availability', methods=['POST'])
@jwt_required()
@swag_from({
    'summary': '店家回覆需求',
    'description': 'A shopkeeper tells the customer whether the item is available, with an optional note and photo links.',
    'tags': ['Responses'],
    'security': [{'bearerAuth': []}],
    'parameters': [
        {
            'name': 'body',
            'in': 'body',
            'required': True,
            'schema': {
                'id': 'ShopResponse',
                'required': ['customerPostId', 'isAvailable'],
                'properties': {
                    'customerPostId': {'type': 'integer', 'example': 1},
                    'isAvailable': {'type': 'boolean', 'example': True},
                    'message': {'type': 'string', 'example': 'In stock, 120 each'},
                    'imageUrls': {'type': 'array', 'items': {'type': 'string'}}
                }
            }
        }
    ],
    'responses': {
        '201': {'description': '回覆成功'},
        '400': {'description': '缺少必要欄位或需求已完成'},
        '403': {'description': '只有店家可以回覆'},
        '404': {'description': '找不到該需求'},
        '409': {'description': '已經回覆過這則需求'}
    }
})
@handle_service_errors
def respond():
    """店家回覆需求"""
    user = get_current_user()
    response = container.resolve(ResponseService).respond(user, request.get_json(silent=True))
    return jsonify({"data": response.to_dict()}), 201


@responses_bp.route('/shopkeeper/requests', methods=['GET'])
@jwt_required()
@swag_from({
    'summary': '店家查看開放中的需求',
    'description': 'Open requests the shopkeeper has not answered yet, newest first.',
    'tags': ['Responses'],
    'security': [{'bearerAuth': []}],
    'responses': {
        '200': {'description': '成功獲取需求列表'},
        '403': {'description': '只有店家可以查看'}
    }
})
@handle_service_errors
def list_open_requests():
    user = get_current_user()
    posts = container.resolve(ResponseService).get_open_requests(user)
    data = []
    for post in posts:
        item = post.to_dict()
        item["customer"] = post.customer.to_summary() if post.customer else None
        data.append(item)
    return jsonify({"data": data}), 200


@responses_bp.route('/customer/shopkeeper/requests', methods=['GET'])
@jwt_required()
@swag_from({
    'summary': '顧客查看店家回覆',
    'description': 'Every shopkeeper response to the calling customer\'s requests, newest first.',
    'tags': ['Responses'],
    'security': [{'bearerAuth': []}],
    'responses': {
        '200': {'description': '成功獲取回覆列表'},
        '403': {'description': '只有顧客可以查看'}
    }
})
@handle_service_errors
def list_responses():
    user = get_current_user()
    responses = container.resolve(ResponseService).get_responses(user)
    data = []
    for response in responses:
        item = response.to_dict()
        item["customer_post"] = {"id": response.customer_post.id, "title": response.customer_post.title}
        data.append(item)
    return jsonify({"data": data}), 200
