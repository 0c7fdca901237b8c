from prompthub.models.challenge import Challenge, ChatMessage, ChatRoom, ChatRoomMember, JoinRequest
from prompthub.models.growth import GrowthProgress, GrowthTopic
from prompthub.models.prompt import Prompt
from prompthub.models.usage_log import UsageLog
from prompthub.models.user import User

__all__ = [
    "User",
    "Prompt",
    "Challenge",
    "ChatRoom",
    "ChatRoomMember",
    "ChatMessage",
    "JoinRequest",
    "GrowthTopic",
    "GrowthProgress",
    "UsageLog",
]
