import punq

from localmart.core.conversation_service import ConversationService
from localmart.core.message_service import MessageService
from localmart.core.post_service import PostService
from localmart.core.read_state_service import ReadStateService
from localmart.core.response_service import ResponseService
from localmart.models import db


def get_container() -> punq.Container:
    container = punq.Container()

    # Register Services
    container.register(ConversationService, factory=lambda: ConversationService(db.session))
    container.register(MessageService, factory=lambda: MessageService(db.session))
    container.register(ReadStateService, factory=lambda: ReadStateService(db.session))
    container.register(PostService, factory=lambda: PostService())
    container.register(ResponseService, factory=lambda: ResponseService())

    return container

# Global container
container = get_container()
