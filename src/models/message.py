"""
Message and collaborator interfaces

The interpreter never touches storage directly. Everything it reads or
mutates outside its own pass state goes through the protocols below, which
the surrounding application implements (ORM models, service objects, or
the in-memory fakes used by the test-suite).
"""

from enum import Enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional, Protocol, Sequence


class Visibility(Enum):
    """Message visibility levels, least to most restricted"""
    PUBLIC = "public"
    UNLISTED = "unlisted"
    PRIVATE = "private"
    DIRECT = "direct"

    @property
    def distributable(self) -> bool:
        """Public and unlisted messages count towards trending tags"""
        return self in (Visibility.PUBLIC, Visibility.UNLISTED)


class ContentType(Enum):
    """Message body formats"""
    PLAIN = "text/plain"
    MARKDOWN = "text/markdown"
    HTML = "text/html"


class EffectKind(Enum):
    """
    Kinds of deferred effect

    The phase an effect runs in is a property of its kind.
    """
    MEDIA_DESCRIPTION = "media_description"   # pre-save
    MENTION = "mention"                       # post-save

    @property
    def presave(self) -> bool:
        return self is EffectKind.MEDIA_DESCRIPTION


@dataclass
class Effect:
    """
    A deferred side effect recorded during the scan

    Attributes:
        kind: What to do, and therefore when
        target: What it applies to (attachment index, account, ...)
        args: Extra arguments

    Example:
        Effect(kind=EffectKind.MEDIA_DESCRIPTION, target=1)
    """
    kind: EffectKind
    target: Any = None
    args: List[str] = field(default_factory=list)


class Account(Protocol):
    id: Any
    username: str
    domain: Optional[str]
    avatar: Optional[Any]


class Emoji(Protocol):
    shortcode: str
    image: Any


class MediaAttachment(Protocol):
    description: Optional[str]

    def save(self) -> None: ...


class Message(Protocol):
    """
    The message record being processed

    text, visibility and content_type are mutable; everything else is read-only.
    reply_to is the parent message (None when this is not a reply).
    """
    id: Any
    text: str
    visibility: Visibility
    content_type: ContentType
    author: Account
    reply_to: Optional["Message"]
    conversation_id: Optional[Any]
    created_at: datetime
    media_attachments: Sequence[MediaAttachment]
    emojis: Sequence[Emoji]
    tag_names: Sequence[str]

    def save(self) -> None: ...


class TagRegistry(Protocol):
    def find_or_create(self, name: str) -> Any: ...

    def attach(self, message: Message, tag: Any) -> None: ...

    def record_trending_use(self, tag: Any, author: Account, timestamp: datetime) -> None: ...


class EmojiRegistry(Protocol):
    def find_local(self, shortcode: str) -> Optional[Emoji]: ...

    def find_remote(self, shortcode: str, domain: Optional[str]) -> Optional[Emoji]: ...

    def create_local(self, shortcode: str, image_source: Any) -> Emoji: ...


class AccountDirectory(Protocol):
    def administrators(self) -> Sequence[Account]: ...

    def moderators(self) -> Sequence[Account]: ...


class PermalinkBuilder(Protocol):
    def url_for(self, message: Message) -> str: ...


class ConversationDirectory(Protocol):
    def messages(self, conversation_id: Any) -> Sequence[Message]: ...


class MentionRegistry(Protocol):
    def find_or_create(self, message: Message, account: Account) -> Any: ...


@dataclass
class Collaborators:
    """
    Everything the interpreter needs from the surrounding application

    Passed explicitly to every pass; there are no ambient lookups.
    """
    tags: TagRegistry
    emojis: EmojiRegistry
    accounts: AccountDirectory
    permalinks: PermalinkBuilder
    conversations: ConversationDirectory
    mentions: MentionRegistry
