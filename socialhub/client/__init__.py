"""Client half of SocialHub: HTTP access, session record, views and polling."""
from .api import ActionResult, AuthResult, SocialHubClient
from .polling import Poller
from .session import SessionStore
from .views import (
    AdminView,
    ChatView,
    GalleryView,
    GroupChatView,
    ProfileView,
    RadarView,
    SettingsView,
)

__all__ = [
    "ActionResult",
    "AuthResult",
    "SocialHubClient",
    "Poller",
    "SessionStore",
    "AdminView",
    "ChatView",
    "GalleryView",
    "GroupChatView",
    "ProfileView",
    "RadarView",
    "SettingsView",
]
