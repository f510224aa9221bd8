import logging

from buddyup.extensions import db
from buddyup.models import Conversation

logger = logging.getLogger(__name__)


class SqlConversationBridge:
    """
    Get-or-create the conversation thread for an accepted match.

    Message storage lives elsewhere; this only guarantees the thread exists.
    The caller owns the transaction and commits.
    """

    def ensure_for_match(self, match) -> int:
        convo = Conversation.query.filter_by(match_id=match.id).first()
        if convo:
            return convo.id

        convo = Conversation(match_id=match.id)
        db.session.add(convo)
        db.session.flush()

        logger.info("Opened conversation %s for match %s", convo.id, match.id)
        return convo.id

    def conversation_id_for(self, match_id):
        convo = Conversation.query.filter_by(match_id=match_id).first()
        return convo.id if convo else None


sql_conversation_bridge = SqlConversationBridge()
