"""
Persistence for Match rows.

Creation relies on the partial unique index on (user_low_id, user_high_id,
sport_id) to stay correct under concurrent requests. Transitions are a
conditional UPDATE on the current status, so a second writer racing on the
same row updates nothing and can be told so.
"""
import logging
from typing import Iterable, List, Optional, Set

from sqlalchemy import or_, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import joinedload, selectinload

from buddyup.errors import Conflict
from buddyup.extensions import db
from buddyup.models import Match, MatchStatus

logger = logging.getLogger(__name__)


def _status_values(statuses):
    return [MatchStatus(s).value for s in statuses]


class SqlMatchStore:

    def get(self, match_id) -> Optional[Match]:
        if match_id is None:
            return None
        return db.session.get(Match, match_id)

    def live_between(self, user_a, user_b, sport_id) -> Optional[Match]:
        """Any non-Rejected match for this pair and sport, either direction."""
        low, high = sorted((user_a, user_b))
        return (
            Match.query
            .filter(
                Match.user_low_id == low,
                Match.user_high_id == high,
                Match.sport_id == sport_id,
                Match.status != MatchStatus.REJECTED.value,
            )
            .first()
        )

    def live_partner_ids(self, user_id) -> Set[int]:
        """Users who share a non-Rejected match of any sport with ``user_id``."""
        rows = (
            db.session.query(Match.requester_id, Match.recipient_id)
            .filter(
                or_(Match.requester_id == user_id, Match.recipient_id == user_id),
                Match.status != MatchStatus.REJECTED.value,
            )
            .all()
        )
        return {
            recipient_id if requester_id == user_id else requester_id
            for requester_id, recipient_id in rows
        }

    def add(self, match: Match) -> Match:
        """
        Insert and commit a new match.

        A unique-index violation means another request for the same pair
        and sport committed first.
        """
        db.session.add(match)
        try:
            db.session.commit()
        except IntegrityError as e:
            db.session.rollback()
            logger.info(
                "Match insert lost race requester=%s recipient=%s sport=%s: %s",
                match.requester_id, match.recipient_id, match.sport_id, e.orig,
            )
            raise Conflict() from e
        return match

    def transition(self, match_id, from_statuses: Iterable, to_status, responded_at) -> bool:
        """
        Move a match to ``to_status`` only if it is still in one of
        ``from_statuses``. Returns False when nothing was updated.
        Does not commit.
        """
        result = db.session.execute(
            update(Match)
            .where(
                Match.id == match_id,
                Match.status.in_(_status_values(from_statuses)),
            )
            .values(
                status=MatchStatus(to_status).value,
                responded_at=responded_at,
            )
            .execution_options(synchronize_session=False)
        )

        if result.rowcount != 1:
            return False

        match = db.session.get(Match, match_id)
        if match is not None:
            db.session.refresh(match)
        return True

    def list_for(self, user_id, status, role="either") -> List[Match]:
        """
        role: "requester", "recipient" or "either".
        Both parties and the sport come back loaded.
        """
        q = (
            Match.query
            .options(
                selectinload(Match.requester),
                selectinload(Match.recipient),
                joinedload(Match.sport),
            )
            .filter(Match.status == MatchStatus(status).value)
        )

        if role == "requester":
            q = q.filter(Match.requester_id == user_id)
        elif role == "recipient":
            q = q.filter(Match.recipient_id == user_id)
        else:
            q = q.filter(or_(Match.requester_id == user_id, Match.recipient_id == user_id))

        return q.order_by(Match.requested_at.desc(), Match.id.desc()).all()

    def commit(self):
        db.session.commit()

    def rollback(self):
        db.session.rollback()


sql_match_store = SqlMatchStore()
