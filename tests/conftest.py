"""
In-memory collaborators for interpreter tests

Every registry and directory the interpreter talks to is faked here, with
a shared event log so tests can check the order in which attachments,
messages and mentions are written.
"""

import itertools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import pytest

from bangtags.models.message import Collaborators, ContentType, Visibility
from bangtags.lib.interpreter import message_process


_ids = itertools.count(1)


@dataclass
class FakeAccount:
    username: str
    domain: Optional[str] = None
    avatar: Optional[str] = None
    id: int = field(default_factory=lambda: next(_ids))


@dataclass
class FakeEmoji:
    shortcode: str
    image: Any
    domain: Optional[str] = None


@dataclass
class FakeAttachment:
    index: int
    events: List[Tuple[str, Any]]
    description: Optional[str] = None

    def save(self) -> None:
        self.events.append(('attachment', (self.index, self.description)))


@dataclass
class FakeMessage:
    text: str
    author: FakeAccount
    events: List[Tuple[str, Any]] = field(default_factory=list)
    visibility: Visibility = Visibility.PUBLIC
    content_type: ContentType = ContentType.PLAIN
    reply_to: Optional["FakeMessage"] = None
    conversation_id: Optional[int] = None
    created_at: datetime = field(default_factory=lambda: datetime(2024, 1, 1, 12, 0))
    media_attachments: List[FakeAttachment] = field(default_factory=list)
    emojis: List[FakeEmoji] = field(default_factory=list)
    tag_names: List[str] = field(default_factory=list)
    saves: int = 0
    id: int = field(default_factory=lambda: next(_ids))

    def save(self) -> None:
        self.saves += 1
        self.events.append(('message', self.text))


class FakeTagRegistry:
    def __init__(self) -> None:
        self.tags: Dict[str, str] = {}
        self.trending: List[Tuple[str, str]] = []

    def find_or_create(self, name: str) -> str:
        return self.tags.setdefault(name, name)

    def attach(self, message: FakeMessage, tag: str) -> None:
        message.tag_names.append(tag)

    def record_trending_use(self, tag: str, author: FakeAccount, timestamp: datetime) -> None:
        self.trending.append((tag, author.username))


class FakeEmojiRegistry:
    def __init__(self) -> None:
        self.local: Dict[str, FakeEmoji] = {}
        self.remote: List[FakeEmoji] = []

    def find_local(self, shortcode: str) -> Optional[FakeEmoji]:
        return self.local.get(shortcode)

    def find_remote(self, shortcode: str, domain: Optional[str]) -> Optional[FakeEmoji]:
        for emoji in self.remote:
            if emoji.shortcode == shortcode and (domain is None or emoji.domain == domain):
                return emoji
        return None

    def create_local(self, shortcode: str, image_source: Any) -> FakeEmoji:
        emoji = FakeEmoji(shortcode=shortcode, image=image_source)
        self.local[shortcode] = emoji
        return emoji


class FakeAccountDirectory:
    def __init__(self) -> None:
        self.admins: List[FakeAccount] = []
        self.mods: List[FakeAccount] = []

    def administrators(self) -> List[FakeAccount]:
        return self.admins

    def moderators(self) -> List[FakeAccount]:
        return self.mods


class FakePermalinks:
    def url_for(self, message: FakeMessage) -> str:
        return f"https://social.test/@{message.author.username}/{message.id}"


class FakeConversations:
    def __init__(self) -> None:
        self.threads: Dict[int, List[FakeMessage]] = {}

    def messages(self, conversation_id: int) -> List[FakeMessage]:
        return self.threads.get(conversation_id, [])


class FakeMentions:
    def __init__(self, events: List[Tuple[str, Any]]) -> None:
        self.events = events
        self.created: List[Tuple[int, str]] = []

    def find_or_create(self, message: FakeMessage, account: FakeAccount) -> Tuple[int, str]:
        mention = (message.id, account.username)
        if mention not in self.created:
            self.created.append(mention)
        self.events.append(('mention', account.username))
        return mention


class World:
    """A small instance: one author, the fake collaborators, and a shared event log"""

    def __init__(self) -> None:
        self.events: List[Tuple[str, Any]] = []
        self.author = FakeAccount(username='me', avatar='me.png')
        self.tags = FakeTagRegistry()
        self.emojis = FakeEmojiRegistry()
        self.accounts = FakeAccountDirectory()
        self.permalinks = FakePermalinks()
        self.conversations = FakeConversations()
        self.mentions = FakeMentions(self.events)
        self.collaborators = Collaborators(
            tags=self.tags,
            emojis=self.emojis,
            accounts=self.accounts,
            permalinks=self.permalinks,
            conversations=self.conversations,
            mentions=self.mentions,
        )

    def message_make(self, text: str, attachments: int = 0, **kwargs: Any) -> FakeMessage:
        kwargs.setdefault('author', self.author)
        message = FakeMessage(text=text, events=self.events, **kwargs)
        message.media_attachments = [
            FakeAttachment(index=i + 1, events=self.events) for i in range(attachments)
        ]
        return message

    def process(self, text: str, attachments: int = 0, interpreter: Optional[dict] = None,
                **kwargs: Any) -> FakeMessage:
        message = self.message_make(text, attachments=attachments, **kwargs)
        self.state = message_process(message, self.collaborators, **(interpreter or {}))
        return message


@pytest.fixture
def world() -> World:
    return World()
