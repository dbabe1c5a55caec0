"""Per-screen view state for the SocialHub client.

A view owns the rows one screen displays. ``refresh()`` re-reads them through
:class:`~socialhub.client.api.SocialHubClient` and replaces the state
wholesale; user actions call the client and then refresh. Views can be driven
on a fixed interval with :meth:`View.poller`.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from .api import ActionResult, Identifier, SocialHubClient
from .polling import (
    ADMIN_INTERVAL,
    CONVERSATIONS_INTERVAL,
    GALLERY_INTERVAL,
    GROUP_CHAT_INTERVAL,
    RADAR_INTERVAL,
    THREAD_INTERVAL,
    Poller,
)

logger = logging.getLogger(__name__)


class View:
    refresh_interval: float = 10.0

    def __init__(self, client: SocialHubClient) -> None:
        self.client = client
        self.busy = False
        self.error: Optional[str] = None

    def refresh(self) -> None:
        raise NotImplementedError

    def poller(self, interval: Optional[float] = None) -> Poller:
        return Poller(self.refresh, interval or self.refresh_interval, name=type(self).__name__)

    def _run(self, result: ActionResult) -> ActionResult:
        self.error = None if result.success else result.error
        return result

    def _perform(self, call, *args: Any, **kwargs: Any) -> ActionResult:
        self.busy = True
        try:
            return self._run(call(*args, **kwargs))
        finally:
            self.busy = False


class RadarView(View):
    """User directory with role filter and free-text search."""

    refresh_interval = RADAR_INTERVAL

    def __init__(self, client: SocialHubClient, *, role: str = "ALL", search: str = "") -> None:
        super().__init__(client)
        self.role = role
        self.search = search
        self.users: list[dict[str, Any]] = []

    def set_filter(self, *, role: Optional[str] = None, search: Optional[str] = None) -> None:
        if role is not None:
            self.role = role
        if search is not None:
            self.search = search
        self.refresh()

    def refresh(self) -> None:
        role = None if self.role in (None, "", "ALL") else self.role
        self.users = self.client.list_users(role=role, search=self.search.strip() or None)


class GalleryView(View):
    """The post feed, paged from newest."""

    refresh_interval = GALLERY_INTERVAL

    def __init__(self, client: SocialHubClient, *, limit: int = 10) -> None:
        super().__init__(client)
        self.limit = limit
        self.page = 1
        self.posts: list[dict[str, Any]] = []
        self.total = 0
        self.has_more = False

    def refresh(self) -> None:
        body = self.client.get_feed(page=1, limit=self.limit)
        self.page = 1
        self.posts = list(body.get("items", []))
        self.total = int(body.get("total", 0))
        self.has_more = bool(body.get("has_more"))

    def load_more(self) -> None:
        if not self.has_more:
            return
        body = self.client.get_feed(page=self.page + 1, limit=self.limit)
        items = list(body.get("items", []))
        if items:
            self.page += 1
            self.posts.extend(items)
        self.has_more = bool(body.get("has_more"))

    def publish(self, content: str = "", image_url: Optional[str] = None) -> ActionResult:
        result = self._perform(self.client.create_post, content, image_url)
        if result.success:
            self.refresh()
        return result

    def react(self, post_id: Identifier, type_: str = "LIKE") -> ActionResult:
        result = self._perform(self.client.toggle_like, post_id, type_)
        if result.success:
            self.refresh()
        return result

    def comment(self, post_id: Identifier, content: str) -> ActionResult:
        result = self._perform(self.client.add_comment, post_id, content)
        if result.success:
            self.refresh()
        return result

    def delete(self, post_id: Identifier) -> ActionResult:
        result = self._perform(self.client.delete_post, post_id)
        if result.success:
            self.posts = [post for post in self.posts if post.get("id") != str(post_id)]
        return result


class ChatView(View):
    """Conversation list plus the currently open direct thread."""

    refresh_interval = CONVERSATIONS_INTERVAL

    def __init__(self, client: SocialHubClient) -> None:
        super().__init__(client)
        self.conversations: list[dict[str, Any]] = []
        self.unread = 0
        self.active_user_id: Optional[str] = None
        self.thread: list[dict[str, Any]] = []

    def refresh(self) -> None:
        self.conversations = self.client.list_conversations()
        self.unread = sum(int(item.get("unread_count", 0)) for item in self.conversations)

    def open(self, other_id: Identifier) -> None:
        self.active_user_id = str(other_id)
        self.thread = []
        self.refresh_thread()

    def close_thread(self) -> None:
        self.active_user_id = None
        self.thread = []

    def refresh_thread(self) -> None:
        if self.active_user_id is None:
            return
        self.thread = self.client.get_thread(self.active_user_id)

    def thread_poller(self, interval: Optional[float] = None) -> Poller:
        return Poller(self.refresh_thread, interval or THREAD_INTERVAL, name="ChatView.thread")

    def send(self, content: Optional[str] = None, image_url: Optional[str] = None) -> ActionResult:
        if self.active_user_id is None:
            return self._run(ActionResult(False, error="No conversation selected"))
        result = self._perform(self.client.send_message, self.active_user_id, content, image_url)
        if result.success:
            self.thread.append(result.data)
        return result


class GroupChatView(View):
    refresh_interval = GROUP_CHAT_INTERVAL

    def __init__(self, client: SocialHubClient, *, limit: int = 50) -> None:
        super().__init__(client)
        self.limit = limit
        self.page = 1
        self.messages: list[dict[str, Any]] = []
        self.has_more = False

    def refresh(self) -> None:
        body = self.client.list_group_messages(page=1, limit=self.limit)
        self.page = 1
        self.messages = list(body.get("messages", []))
        self.has_more = bool(body.get("has_more"))

    def load_older(self) -> None:
        if not self.has_more:
            return
        body = self.client.list_group_messages(page=self.page + 1, limit=self.limit)
        older = list(body.get("messages", []))
        if older:
            self.page += 1
            self.messages = older + self.messages
        self.has_more = bool(body.get("has_more"))

    def send(self, content: Optional[str] = None, image_url: Optional[str] = None) -> ActionResult:
        result = self._perform(self.client.send_group_message, content, image_url)
        if result.success:
            self.messages.append(result.data)
        return result


class ProfileView(View):
    """An account's public profile: details, counters and posts."""

    def __init__(self, client: SocialHubClient, user_id: Identifier) -> None:
        super().__init__(client)
        self.user_id = str(user_id)
        self.user: Optional[dict[str, Any]] = None
        self.stats: dict[str, Any] = {"posts_count": 0, "likes_count": 0}
        self.posts: list[dict[str, Any]] = []

    @property
    def is_own_profile(self) -> bool:
        me = self.client.current_user
        return bool(me and me.get("id") == self.user_id)

    def refresh(self) -> None:
        self.user = self.client.get_user(self.user_id)
        self.stats = self.client.get_user_stats(self.user_id) or {"posts_count": 0, "likes_count": 0}
        self.posts = self.client.list_user_posts(self.user_id)


class SettingsView(View):
    def __init__(self, client: SocialHubClient) -> None:
        super().__init__(client)
        self.notice: Optional[str] = None

    @property
    def user(self) -> Optional[dict[str, Any]]:
        return self.client.current_user

    def refresh(self) -> None:
        self.client.refresh_current_user()

    def save_profile(
        self,
        *,
        display_name: Optional[str] = None,
        bio: Optional[str] = None,
        avatar_url: Optional[str] = None,
    ) -> bool:
        self.busy = True
        try:
            outcome = self.client.update_profile(display_name=display_name, bio=bio, avatar_url=avatar_url)
        finally:
            self.busy = False
        self.error = outcome.error
        self.notice = "Profile updated" if outcome.success else None
        return outcome.success

    def change_password(self, current_password: str, new_password: str, confirm_password: str) -> bool:
        result = self._perform(self.client.change_password, current_password, new_password, confirm_password)
        self.notice = "Password changed" if result.success else None
        return result.success

    def logout(self) -> None:
        self.client.logout()


class AdminView(View):
    """Account management and site counters for administrators."""

    refresh_interval = ADMIN_INTERVAL

    def __init__(self, client: SocialHubClient, *, search: str = "") -> None:
        super().__init__(client)
        self.search = search
        self.users: list[dict[str, Any]] = []
        self.stats: Optional[dict[str, Any]] = None

    def refresh(self) -> None:
        self.users = self.client.admin_list_users(search=self.search.strip() or None)
        self.stats = self.client.site_stats()

    def _find(self, user_id: Identifier) -> Optional[dict[str, Any]]:
        return next((user for user in self.users if user.get("id") == str(user_id)), None)

    def _update(self, user_id: Identifier, **changes: Any) -> ActionResult:
        result = self._perform(self.client.admin_update_user, user_id, **changes)
        if result.success:
            self.users = [result.data if user.get("id") == str(user_id) else user for user in self.users]
        return result

    def set_role(self, user_id: Identifier, role: str) -> ActionResult:
        return self._update(user_id, role=role)

    def set_frame(self, user_id: Identifier, frame_style: str) -> ActionResult:
        return self._update(user_id, frame_style=frame_style)

    def toggle_shiny(self, user_id: Identifier) -> ActionResult:
        user = self._find(user_id) or {}
        return self._update(user_id, is_shiny=not user.get("is_shiny", False))

    def toggle_verified(self, user_id: Identifier) -> ActionResult:
        user = self._find(user_id) or {}
        return self._update(user_id, is_verified=not user.get("is_verified", False))

    def delete_user(self, user_id: Identifier) -> ActionResult:
        result = self._perform(self.client.admin_delete_user, user_id)
        if result.success:
            self.users = [user for user in self.users if user.get("id") != str(user_id)]
        return result

    def delete_post(self, post_id: Identifier) -> ActionResult:
        return self._perform(self.client.admin_delete_post, post_id)


__all__ = [
    "View",
    "RadarView",
    "GalleryView",
    "ChatView",
    "GroupChatView",
    "ProfileView",
    "SettingsView",
    "AdminView",
]
