import pytest

from localmart.core.conversation_service import ConversationService
from localmart.core.errors import InvalidInputError, NotFoundError, PermissionDeniedError
from localmart.core.message_service import MessageService
from localmart.models import Conversation, CustomerPost


@pytest.fixture
def service(session):
    return ConversationService(session)


def test_resolve_creates_conversation_on_first_contact(service, marketplace):
    post, shopkeeper = marketplace['post'], marketplace['shopkeeper']

    conversation = service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)

    assert conversation.id is not None
    assert conversation.customer_post_id == post.id
    assert conversation.customer_id == marketplace['customer'].id
    assert conversation.shopkeeper_id == shopkeeper.id
    assert conversation.messages == []


def test_resolve_is_idempotent(service, marketplace):
    post, shopkeeper = marketplace['post'], marketplace['shopkeeper']

    first = service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)
    second = service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)
    from_customer = service.resolve_or_create(str(post.id), str(shopkeeper.id), caller_id=marketplace['customer'].id)

    assert first.id == second.id == from_customer.id
    assert Conversation.query.count() == 1


def test_resolve_returns_history_in_order(service, session, marketplace):
    post, shopkeeper, customer = marketplace['post'], marketplace['shopkeeper'], marketplace['customer']
    conversation = service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)
    messages = MessageService(session)
    messages.append(conversation.id, shopkeeper.id, "We have it")
    messages.append(conversation.id, customer.id, "Great, how much?")

    again = service.resolve_or_create(post.id, shopkeeper.id, caller_id=customer.id)

    assert [m.content for m in again.messages] == ["We have it", "Great, how much?"]


def test_each_responder_gets_its_own_conversation(service, marketplace):
    post = marketplace['post']

    a = service.resolve_or_create(post.id, marketplace['shopkeeper'].id, caller_id=marketplace['shopkeeper'].id)
    b = service.resolve_or_create(post.id, marketplace['other_shopkeeper'].id, caller_id=marketplace['other_shopkeeper'].id)

    assert a.id != b.id
    assert Conversation.query.count() == 2


def test_resolve_unknown_request_is_not_found(service, marketplace):
    shopkeeper = marketplace['shopkeeper']

    with pytest.raises(NotFoundError):
        service.resolve_or_create(9999, shopkeeper.id, caller_id=shopkeeper.id)
    assert Conversation.query.count() == 0


def test_resolve_unknown_responder_is_not_found(service, marketplace):
    with pytest.raises(NotFoundError):
        service.resolve_or_create(marketplace['post'].id, 9999, caller_id=marketplace['customer'].id)


def test_resolve_requires_ids(service, marketplace):
    with pytest.raises(InvalidInputError):
        service.resolve_or_create(None, marketplace['shopkeeper'].id, caller_id=marketplace['shopkeeper'].id)
    with pytest.raises(InvalidInputError):
        service.resolve_or_create(marketplace['post'].id, "abc", caller_id=marketplace['shopkeeper'].id)


def test_customer_cannot_respond_to_own_request(service, marketplace):
    customer = marketplace['customer']

    with pytest.raises(InvalidInputError):
        service.resolve_or_create(marketplace['post'].id, customer.id, caller_id=customer.id)


def test_responder_must_be_a_shopkeeper(service, marketplace):
    outsider = marketplace['outsider']

    with pytest.raises(InvalidInputError):
        service.resolve_or_create(marketplace['post'].id, outsider.id, caller_id=outsider.id)
    assert Conversation.query.count() == 0


def test_outsider_cannot_open_conversation(service, marketplace):
    post, shopkeeper = marketplace['post'], marketplace['shopkeeper']

    with pytest.raises(PermissionDeniedError):
        service.resolve_or_create(post.id, shopkeeper.id, caller_id=marketplace['outsider'].id)

    service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)
    with pytest.raises(PermissionDeniedError):
        service.resolve_or_create(post.id, shopkeeper.id, caller_id=marketplace['other_shopkeeper'].id)


def test_concurrent_first_contact_reuses_the_winning_row(service, session, marketplace, mocker):
    """
    Simulates losing a first-contact race: the lookup misses, but another
    request has already inserted the row, so the insert hits the unique
    constraint and the existing conversation is returned instead.
    """
    post, shopkeeper = marketplace['post'], marketplace['shopkeeper']
    winner = Conversation(customer_post_id=post.id, customer_id=post.customer_id, shopkeeper_id=shopkeeper.id)
    session.add(winner)
    session.commit()
    winner_id = winner.id

    real_find = service.conversations.find_by_pair
    calls = []

    def stale_then_real(*args, **kwargs):
        calls.append(args)
        if len(calls) == 1:
            return None
        return real_find(*args, **kwargs)

    mocker.patch.object(service.conversations, 'find_by_pair', side_effect=stale_then_real)

    conversation = service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)

    assert conversation.id == winner_id
    assert len(calls) == 2
    assert Conversation.query.count() == 1


def test_list_summaries(service, session, marketplace):
    post, shopkeeper, customer = marketplace['post'], marketplace['shopkeeper'], marketplace['customer']
    other = marketplace['other_shopkeeper']
    first = service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)
    second = service.resolve_or_create(post.id, other.id, caller_id=other.id)
    messages = MessageService(session)
    messages.append(first.id, shopkeeper.id, "We have it")
    messages.append(second.id, other.id, "Me too")
    messages.append(second.id, other.id, "Cheaper here")

    summaries = service.list_summaries(customer.id)

    assert [s['id'] for s in summaries] == [second.id, first.id]
    assert summaries[0]['unread_count'] == 2
    assert summaries[0]['last_message']['content'] == "Cheaper here"
    assert summaries[0]['counterpart']['id'] == other.id
    assert summaries[0]['customer_post'] == {"id": post.id, "title": post.title}
    assert summaries[1]['unread_count'] == 1

    shop_view = service.list_summaries(shopkeeper.id)
    assert [s['id'] for s in shop_view] == [first.id]
    assert shop_view[0]['unread_count'] == 0
    assert shop_view[0]['counterpart']['id'] == customer.id


def test_list_summaries_role_filter(service, session, marketplace):
    post, shopkeeper = marketplace['post'], marketplace['shopkeeper']
    service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)

    assert service.list_summaries(shopkeeper.id, role='customer') == []
    assert len(service.list_summaries(shopkeeper.id, role='SHOPKEEPER')) == 1
    with pytest.raises(InvalidInputError):
        service.list_summaries(shopkeeper.id, role='ADMIN')


def test_list_summaries_empty_conversation(service, marketplace):
    post, shopkeeper = marketplace['post'], marketplace['shopkeeper']
    service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)

    summary = service.list_summaries(shopkeeper.id)[0]

    assert summary['last_message'] is None
    assert summary['unread_count'] == 0


def test_list_summaries_for_user_without_conversations(service, session, marketplace):
    session.add(CustomerPost(customer_id=marketplace['outsider'].id, title='Need glue'))
    session.commit()

    assert service.list_summaries(marketplace['outsider'].id) == []


def test_list_summaries_blank_role_means_both_sides(service, marketplace):
    post, shopkeeper = marketplace['post'], marketplace['shopkeeper']
    service.resolve_or_create(post.id, shopkeeper.id, caller_id=shopkeeper.id)

    assert len(service.list_summaries(shopkeeper.id, role='')) == 1
    assert len(service.list_summaries(marketplace['customer'].id, role='')) == 1
