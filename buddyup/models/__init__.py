from .user import User
from .profile import UserProfile
from .sport import Sport
from .user_sport import UserSport, SKILL_LEVELS
from .location import Location
from .match import Match, MatchStatus
from .conversation import Conversation
