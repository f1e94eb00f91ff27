"""
Directive implementations for bangtags

Each directive handler receives the parsed Command and the running
Interpreter, and returns the chunk(s) it produces: a string, a list of
strings, or None for no output. Handlers mutate interpreter state (scopes,
variables, effects) and call collaborators through the interpreter.
"""

import math
import re
from typing import Any, Dict, List, Optional, Union

from ..models.directives import (
    DirectiveCategory,
    DirectiveSpec,
    END_WORDS,
    ENDALL_WORDS,
    reserved_is,
)
from ..models.message import Effect, EffectKind, Visibility
from ..models.parser import Command
from ..models.scope import Scope, ScopeKind
from ..models.tables import (
    CHARACTER_NAMES,
    CONTENT_TYPES,
    KEYSMASH_KEYS,
    SHRUG,
    VISIBILITIES,
)
from .log import LOG
from .tokenizer import MARKER_ESCAPED


HandlerResult = Union[str, List[str], None]

SHORTCODE_PATTERN = re.compile(r'[A-Za-z0-9_]+')
HEX_PATTERN = re.compile(r'[0-9A-Fa-f]{1,5}')
INDEX_PATTERN = re.compile(r'[0-9]+')
BANGTAG_PREFIX = re.compile(r'\Abangtag:?', re.IGNORECASE)


def lowered(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


def mention_format(account: Any) -> str:
    """@user for local accounts, @user@domain for remote ones"""
    if getattr(account, 'domain', None):
        return f"@{account.username}@{account.domain}"
    return f"@{account.username}"


class DirectiveRegistry:
    """
    Registry of directive specifications and handlers

    Maps command names (and their aliases) to DirectiveSpec objects.
    Lookup is case-insensitive.
    """

    def __init__(self) -> None:
        """Initialize the directive registry and register all built-in directives"""
        self.specs: Dict[str, DirectiveSpec] = {}
        self.scopeDirectives_register()
        self.textDirectives_register()
        self.emojiDirectives_register()
        self.linkDirectives_register()
        self.taggingDirectives_register()
        self.messageDirectives_register()

    def register(self, spec: DirectiveSpec) -> None:
        """
        Register a directive specification under its name and aliases

        Raises:
            ValueError: If a name or alias is already taken
        """
        for name in [spec.name, *spec.aliases]:
            if name in self.specs:
                raise ValueError(f"Directive '{name}' is already registered")
            self.specs[name] = spec

    def spec_get(self, name: str) -> Optional[DirectiveSpec]:
        """Get full directive specification by command name"""
        return self.specs.get(name.lower())

    def directives_listByCategory(self, category: DirectiveCategory) -> List[DirectiveSpec]:
        """Get all directives in a category (each spec once)"""
        seen: List[DirectiveSpec] = []
        for spec in self.specs.values():
            if spec.category == category and spec not in seen:
                seen.append(spec)
        return seen

    def scopeDirectives_register(self) -> None:
        """Register directives that open and close scopes"""

        def var_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!var - read, assign, or capture into a variable"""
            name = command.arg(1)
            if name is None:
                return None

            if name.lower() in END_WORDS:
                interp.scopes.kind_popInnermost(ScopeKind.CAPTURE)
                return None
            if name.lower() in ENDALL_WORDS:
                interp.scopes.kind_clear(ScopeKind.CAPTURE)
                return None
            if reserved_is(name):
                return None

            value = command.args(2)
            if not value:
                return interp.state.variables.get(name)
            if value == ['-']:
                interp.scopes.scope_push(Scope.capture(name))
            else:
                interp.state.variables[name] = ':'.join(value)
            return None

        def tf_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!tf - push or pop a text transform"""
            verb = command.arg(1)
            if verb is None:
                return None

            if verb.lower() in END_WORDS:
                interp.scopes.kind_popInnermost(ScopeKind.TRANSFORM)
            elif verb.lower() in ENDALL_WORDS:
                interp.scopes.kind_clear(ScopeKind.TRANSFORM)
            else:
                interp.scopes.scope_push(Scope.transforming(verb, command.args(2)))
            return None

        def end_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!end - close whatever scope was opened last"""
            interp.scopes.scope_pop()
            return None

        def endall_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!endall - close every scope"""
            interp.scopes.scopes_clear()
            return None

        def hide_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!hide - discard output until closed"""
            sub = lowered(command.arg(1))
            if sub is None:
                if not interp.scopes.kind_contains(ScopeKind.HIDE):
                    interp.scopes.scope_push(Scope.hide())
            elif sub in END_WORDS or sub in ENDALL_WORDS:
                interp.scopes.kind_clear(ScopeKind.HIDE)
            return None

        def comment_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!comment - ignore everything until #!comment:end"""
            if command.arg(1) is None:
                interp.scopes.scope_push(Scope.comment())
            return None

        self.register(DirectiveSpec(
            name='var',
            category=DirectiveCategory.SCOPE,
            description='Read, set, or capture output into a variable',
            handler=var_handler,
            examples=['#!var:name', '#!var:name:value', '#!var:name:- captured #!var:end'],
        ))

        self.register(DirectiveSpec(
            name='tf',
            category=DirectiveCategory.SCOPE,
            description='Apply text substitutions to everything that follows',
            handler=tf_handler,
            examples=['#!tf:s:cat:dog', '#!tf:gs:a:4:e:3', '#!tf:end'],
        ))

        self.register(DirectiveSpec(
            name='end',
            category=DirectiveCategory.SCOPE,
            description='Close the most recently opened scope',
            handler=end_handler,
            aliases=['stop'],
            examples=['#!end'],
        ))

        self.register(DirectiveSpec(
            name='endall',
            category=DirectiveCategory.SCOPE,
            description='Close every open scope',
            handler=endall_handler,
            aliases=['stopall'],
            examples=['#!endall'],
        ))

        self.register(DirectiveSpec(
            name='hide',
            category=DirectiveCategory.SCOPE,
            description='Discard output until closed',
            handler=hide_handler,
            examples=['#!hide secret #!hide:end'],
        ))

        self.register(DirectiveSpec(
            name='comment',
            category=DirectiveCategory.SCOPE,
            description='Ignore text and directives until #!comment:end',
            handler=comment_handler,
            examples=['#!comment #!shrug is not run #!comment:end'],
        ))

    def textDirectives_register(self) -> None:
        """Register directives that produce text"""

        def char_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!char - named characters and hex code points"""
            chunks: List[str] = []
            for arg in command.args(1):
                if arg in CHARACTER_NAMES:
                    chunks.append(CHARACTER_NAMES[arg])
                elif HEX_PATTERN.fullmatch(arg) and int(arg, 16) > 0:
                    character = chr(int(arg, 16))
                    try:
                        character.encode('utf-8')
                    except UnicodeEncodeError:
                        character = '?'
                    chunks.append(character)
            return chunks

        def join_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!join - join items with a named or literal separator"""
            separator = command.arg(1)
            if separator is None:
                return None
            separator = CHARACTER_NAMES.get(separator, separator)
            return separator.join(command.args(2))

        def shrug_handler(command: Command, interp: Any) -> HandlerResult:
            return SHRUG

        def keysmash_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!keysmash - home-row-heavy random characters"""
            settings = interp.settings
            rng = interp.rng
            length = rng.randint(settings.keysmash_min_length, settings.keysmash_max_length)
            characters = []
            for _ in range(length):
                group = KEYSMASH_KEYS[math.floor(len(KEYSMASH_KEYS) * rng.random() ** 3)]
                characters.append(rng.choice(group))
            return ''.join(characters)

        def bangtag_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!bangtag - show directive markup without running it"""
            rest = BANGTAG_PREFIX.sub('', command.raw, count=1) or command.raw
            return MARKER_ESCAPED + rest.replace(':', ':\u200c')

        self.register(DirectiveSpec(
            name='char',
            category=DirectiveCategory.TEXT,
            description='Insert named characters or Unicode code points',
            handler=char_handler,
            examples=['#!char:zws', '#!char:2603:1f600', '#!char:\\n'],
        ))

        self.register(DirectiveSpec(
            name='join',
            category=DirectiveCategory.TEXT,
            description='Join items with a separator',
            handler=join_handler,
            examples=['#!join:zwj:a:b', '#!{join:, :x:y:z}'],
        ))

        self.register(DirectiveSpec(
            name='shrug',
            category=DirectiveCategory.TEXT,
            description='Insert a shrug',
            handler=shrug_handler,
            examples=['#!shrug'],
        ))

        self.register(DirectiveSpec(
            name='keysmash',
            category=DirectiveCategory.TEXT,
            description='Insert a random keysmash',
            handler=keysmash_handler,
            examples=['#!keysmash'],
        ))

        self.register(DirectiveSpec(
            name='bangtag',
            category=DirectiveCategory.TEXT,
            description='Show directive markup literally',
            handler=bangtag_handler,
            examples=['#!bangtag:shrug'],
        ))

    def emojiDirectives_register(self) -> None:
        """Register custom emoji directives"""

        def emojify_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!emojify - turn an avatar into a local custom emoji"""
            source = lowered(command.arg(1))
            if source is None:
                return None

            image = None
            shortcode = command.arg(2)
            if source == 'avatar':
                image = interp.message.author.avatar
            elif source == 'parent':
                parent = interp.message.reply_to
                shortcode = command.arg(3)
                if parent is None or not shortcode:
                    return None
                if lowered(command.arg(2)) == 'avatar':
                    image = parent.author.avatar

            if image is None or shortcode is None or not SHORTCODE_PATTERN.fullmatch(shortcode):
                return None

            interp.emoji_import(shortcode, image)
            return f":{shortcode}:"

        def emoji_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!emoji - copy a remote custom emoji to the local registry"""
            shortcode = command.arg(1)
            if shortcode is None:
                return None
            domain = command.arg(2)
            domain = domain.strip().lower() if domain and domain.strip() else None

            registry = interp.collaborators.emojis
            if registry.find_local(shortcode) is None:
                theirs = registry.find_remote(shortcode, domain)
                if theirs is not None:
                    interp.emoji_import(shortcode, theirs.image)
            return f":{shortcode}:"

        self.register(DirectiveSpec(
            name='emojify',
            category=DirectiveCategory.EMOJI,
            description='Create a custom emoji from an avatar',
            handler=emojify_handler,
            examples=['#!emojify:avatar:me', '#!emojify:parent:avatar:them'],
        ))

        self.register(DirectiveSpec(
            name='emoji',
            category=DirectiveCategory.EMOJI,
            description='Import a custom emoji from another instance',
            handler=emoji_handler,
            examples=['#!emoji:blobcat', '#!emoji:blobcat:example.com'],
        ))

    def linkDirectives_register(self) -> None:
        """Register directives that reference other messages and accounts"""

        def link_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!link - this message's permalink"""
            if lowered(command.arg(1)) in ('permalink', 'self'):
                return interp.collaborators.permalinks.url_for(interp.message)
            return None

        def ping_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!ping - mention instance staff"""
            role = lowered(command.arg(1))
            directory = interp.collaborators.accounts
            accounts: List[Any] = []
            if role in ('admins', 'staff'):
                accounts += list(directory.administrators())
            if role in ('mods', 'staff'):
                accounts += list(directory.moderators())
            mentions = sorted({f"@{account.username}" for account in accounts})
            return ' '.join(mentions) or None

        def thread_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!thread - act on the whole conversation"""
            sub = lowered(command.arg(1))
            message = interp.message
            if message.conversation_id is None:
                return None
            messages = interp.collaborators.conversations.messages(message.conversation_id)
            author_id = message.author.id

            if sub == 'reall':
                mentions = [extra.strip() for extra in command.args(2) if extra.strip()]
                for other in messages:
                    if other.author.id != author_id:
                        mentions.append(mention_format(other.author))
                return ' '.join(dict.fromkeys(mentions)) or None

            if sub == 'emoji':
                for other in messages:
                    if other.author.id == author_id:
                        for emoji in other.emojis:
                            interp.emoji_import(emoji.shortcode, emoji.image)
            return None

        def parent_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!parent - act on the message being replied to"""
            sub = lowered(command.arg(1))
            parent = interp.message.reply_to
            if sub is None or parent is None:
                return None

            if sub == 'permalink':
                return interp.collaborators.permalinks.url_for(parent)
            if sub == 'tag':
                if parent.author.id == interp.message.author.id:
                    interp.tags_add(parent, command.args(2))
            elif sub == 'emoji':
                for emoji in parent.emojis:
                    interp.emoji_import(emoji.shortcode, emoji.image)
            return None

        self.register(DirectiveSpec(
            name='link',
            category=DirectiveCategory.LINK,
            description="Insert this message's permalink",
            handler=link_handler,
            examples=['#!link:self', '#!permalink'],
        ))

        self.register(DirectiveSpec(
            name='ping',
            category=DirectiveCategory.LINK,
            description='Mention administrators, moderators, or both',
            handler=ping_handler,
            examples=['#!ping:admins', '#!ping:mods', '#!ping:staff'],
        ))

        self.register(DirectiveSpec(
            name='thread',
            category=DirectiveCategory.LINK,
            description='Mention everyone in the thread, or import its emoji',
            handler=thread_handler,
            examples=['#!thread:reall', '#!thread:reall:@friend', '#!thread:emoji'],
        ))

        self.register(DirectiveSpec(
            name='parent',
            category=DirectiveCategory.LINK,
            description='Link, tag, or borrow emoji from the replied-to message',
            handler=parent_handler,
            examples=['#!parent:permalink', '#!parent:tag:series', '#!parent:emoji'],
        ))

    def taggingDirectives_register(self) -> None:
        """Register the hashtag directive"""

        def tag_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!tag - attach hashtags without writing them out"""
            interp.tags_add(interp.message, command.args(1))
            return None

        self.register(DirectiveSpec(
            name='tag',
            category=DirectiveCategory.TAGGING,
            description='Attach hidden hashtags',
            handler=tag_handler,
            examples=['#!tag:foo:bar', '#!tag:self\\:notes'],
        ))

    def messageDirectives_register(self) -> None:
        """Register directives that change the message record"""

        def media_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!media - describe an attachment"""
            index = command.arg(1)
            action = lowered(command.arg(2))
            if not index or not action or not INDEX_PATTERN.fullmatch(index):
                return None
            position = int(index)
            if not 1 <= position <= len(interp.message.media_attachments):
                return None

            if action == 'desc':
                name = interp.settings.mediaVar_make(position)
                text = command.args(3)
                if text:
                    interp.state.variables[name] = ':'.join(text)
                else:
                    interp.scopes.scope_push(Scope.capture(name))
                interp.effects.effect_queue(
                    Effect(kind=EffectKind.MEDIA_DESCRIPTION, target=position, args=[name])
                )
            return None

        def draft_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!draft - keep the message to yourself and drop the rest"""
            state = interp.state
            banner = interp.settings.draft_banner
            if not state.drafted and not (state.chunks and state.chunks[0].startswith(banner)):
                state.chunks.insert(0, banner)
            state.drafted = True

            interp.message.visibility = Visibility.DIRECT
            interp.tags_add(interp.message, [interp.settings.draft_tag])
            interp.scopes.scope_push(Scope.draft())
            interp.effects.effect_queue(Effect(kind=EffectKind.MENTION, target=interp.message.author))
            return None

        def format_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!format / #!type - set the content type"""
            content_type = CONTENT_TYPES.get(lowered(command.arg(1)) or '')
            if content_type is not None:
                interp.message.content_type = content_type
                LOG(f"Content type set to {content_type.value}", level=2)
            return None

        def visibility_handler(command: Command, interp: Any) -> HandlerResult:
            """Handle #!visibility - set who can see the message"""
            visibility = VISIBILITIES.get(lowered(command.arg(1)) or '')
            if visibility is not None:
                interp.message.visibility = visibility
                LOG(f"Visibility set to {visibility.value}", level=2)
            return None

        self.register(DirectiveSpec(
            name='media',
            category=DirectiveCategory.MESSAGE,
            description='Set a media attachment description',
            handler=media_handler,
            examples=['#!media:1:desc:A cat', '#!media:1:desc A long description#!media:end'],
        ))

        self.register(DirectiveSpec(
            name='draft',
            category=DirectiveCategory.MESSAGE,
            description='Save as a private draft and hide the rest of the text',
            handler=draft_handler,
            examples=['Notes to self #!draft'],
        ))

        self.register(DirectiveSpec(
            name='format',
            category=DirectiveCategory.MESSAGE,
            description='Set the content type',
            handler=format_handler,
            aliases=['type'],
            examples=['#!format:markdown', '#!type:html'],
        ))

        self.register(DirectiveSpec(
            name='visibility',
            category=DirectiveCategory.MESSAGE,
            description='Set the message visibility',
            handler=visibility_handler,
            examples=['#!visibility:unlisted', '#!visibility:dm'],
        ))
