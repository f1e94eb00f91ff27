"""
Interpreter for #!directives in message text

Runs one processing pass over a message: scans its text, dispatches each
directive, rewrites the text, and runs deferred effects around saving the
message record.
"""

import random
import re
from typing import Any, Iterable, List, Optional

from ..config import appsettings, AppSettings
from ..models.directives import COMMENT_CLOSERS
from ..models.message import Collaborators, Message
from ..models.parser import Command, Span
from ..models.scope import ScopeKind
from ..models.state import PassState, pipeline, state_summary
from .directives import DirectiveRegistry
from .effects import EffectScheduler
from .log import LOG, WARN, state_connectToLogger
from .parser import Parser
from .scopes import ScopeStack
from .tokenizer import Tokenizer
from .transforms import transforms_apply


# Word-like, with at least one letter, underscore or separator
TAG_NAME_PATTERN = re.compile(r'[\w.·\-]*(?:[^\W\d]|[.·\-])[\w.·\-]*')


class Interpreter:
    """
    Processes the #!directives of one message

    Responsibilities:
    - Split the text into spans and parse directive spans
    - Track scopes (captures, transforms, hide, comment, draft)
    - Dispatch commands through the DirectiveRegistry
    - Place produced chunks into the output or the active capture
    - Run pre-save effects, save the message, run post-save effects

    One Interpreter serves exactly one pass; build a new one per message.
    """

    def __init__(
        self,
        message: Message,
        collaborators: Collaborators,
        verbosity: Optional[int] = None,
        registry: Optional[DirectiveRegistry] = None,
        parser: Optional[Parser] = None,
        rng: Optional[random.Random] = None,
        settings: Optional[AppSettings] = None,
    ) -> None:
        """
        Initialize interpreter

        Args:
            message: Message record to process (mutated in place)
            collaborators: Registries and directories used by directives
            verbosity: Logging verbosity (defaults to the configured value)
            registry: Directive registry (defaults to the built-in directives)
            parser: Command parser (defaults to the built-in tables)
            rng: Random source for #!keysmash
            settings: Configuration (defaults to the environment-loaded singleton)
        """
        self.message = message
        self.collaborators = collaborators
        self.settings = settings or appsettings
        if verbosity is None:
            verbosity = 3 if self.settings.debug_mode else self.settings.verbosity

        self.state = PassState(
            message=message,
            collaborators=collaborators,
            verbosity=verbosity,
        )
        self.scopes = ScopeStack()
        self.effects = EffectScheduler(self.state.effects)
        self.registry = registry or DirectiveRegistry()
        self.parser = parser or Parser()
        self.rng = rng or random.Random()

    def process(self) -> PassState:
        """
        Run the full pass

        Text without any "#!" is left untouched: nothing is dispatched,
        no effect runs and the message is not saved.

        Returns:
            The finished PassState
        """
        state_connectToLogger(self.state)

        if not Tokenizer.marker_has(self.message.text):
            LOG("No directives; message left untouched", level=2)
            return self.state

        LOG(f"Processing directives in message {self.message.id!r}", level=1)
        state = pipeline(
            self.state,
            self.text_scan,
            self.effects_presave,
            self.message_persist,
            self.effects_postsave,
        )
        LOG(f"Pass complete: {state_summary(state)}", level=2)
        return state

    def text_scan(self, state: PassState) -> PassState:
        """Stage 1: interpret every span of the message text"""
        for span in Tokenizer(self.message.text).spans_split():
            self.span_process(span)
        return state

    def effects_presave(self, state: PassState) -> PassState:
        """Stage 2: settle captured values and run pre-save effects"""
        for name, value in state.variables.items():
            state.variables[name] = value.rstrip()
        self.effects.effects_runPreSave(state)
        return state

    def message_persist(self, state: PassState) -> PassState:
        """Stage 3: write the rewritten text and save the message"""
        self.message.text = state.text
        self.message.save()
        state.persisted = True
        LOG(f"Saved message {self.message.id!r}", level=2)
        return state

    def effects_postsave(self, state: PassState) -> PassState:
        """Stage 4: run post-save effects"""
        self.effects.effects_runPostSave(state)
        return state

    def span_process(self, span: Span) -> None:
        """
        Interpret one span

        Literal spans become chunks. Directive spans are parsed and
        dispatched, unless a comment or draft scope suppresses them.
        """
        LOG(f"Span: {span.text!r}", level=3)

        if self.scopes.draft_active():
            return

        if not span.is_directive:
            self.chunk_place(span.text)
            return

        body = Tokenizer.body_extract(span.text)

        if self.scopes.comment_active():
            if body.lower() in COMMENT_CLOSERS:
                self.scopes.kind_popInnermost(ScopeKind.COMMENT)
            return

        command = self.parser.command_parse(body)
        for chunk in self.command_dispatch(command):
            self.chunk_place(chunk)

    def command_dispatch(self, command: Command) -> List[str]:
        """
        Execute one command

        Unknown commands and commands whose handler fails produce nothing.

        Returns:
            Chunks produced by the command, in order
        """
        if command.name is None:
            return []

        spec = self.registry.spec_get(command.name)
        if spec is None:
            LOG(f"Unknown directive '{command.name}' dropped", level=2)
            return []

        LOG(f"Dispatching {command.fields!r}", level=2)
        try:
            result = spec.handler(command, self)
        except Exception as e:
            WARN(f"Directive '{command.name}' failed and was dropped: {e}")
            return []

        if result is None:
            return []
        if isinstance(result, str):
            return [result]
        return list(result)

    def chunk_place(self, chunk: str) -> None:
        """
        Transform a chunk and send it to exactly one destination

        Destinations: the innermost capture target if there is one,
        otherwise the output. A capture scope keeps the chunk in its
        variable (left-stripped when the variable is new, right-stripped
        when appending); hide, comment and draft scopes discard it.
        """
        if not chunk:
            return
        chunk = transforms_apply(chunk, self.scopes.transforms_active())
        if not chunk:
            return

        target = self.scopes.capture_top()
        if target is None:
            self.state.chunks.append(chunk)
            return

        if target.kind is not ScopeKind.CAPTURE or not chunk.strip():
            return

        variables = self.state.variables
        if target.name not in variables:
            variables[target.name] = chunk.lstrip()
        else:
            variables[target.name] += chunk.rstrip()

    def tags_add(self, message: Message, names: Iterable[str]) -> List[str]:
        """
        Attach hashtags to a message

        Delimiters inside a name are restored as ".", invalid names are
        skipped, duplicates (and tags the message already has) are dropped.
        Trending use is recorded for public and unlisted messages.

        Returns:
            Names actually attached
        """
        registry = self.collaborators.tags
        existing = {name.lower() for name in (message.tag_names or [])}
        attached: List[str] = []

        for name in dict.fromkeys(n.replace(':', '.') for n in names):
            if not name or not TAG_NAME_PATTERN.fullmatch(name):
                continue
            if name.lower() in existing:
                continue
            tag = registry.find_or_create(name)
            registry.attach(message, tag)
            if message.visibility.distributable:
                registry.record_trending_use(tag, message.author, message.created_at)
            existing.add(name.lower())
            attached.append(name)

        if attached:
            LOG(f"Tagged message with {attached}", level=2)
        return attached

    def emoji_import(self, shortcode: str, image: Any) -> bool:
        """
        Create a local custom emoji unless one already exists

        Returns:
            True if a new local emoji was created
        """
        registry = self.collaborators.emojis
        if registry.find_local(shortcode) is not None:
            return False
        registry.create_local(shortcode, image)
        LOG(f"Imported emoji :{shortcode}:", level=2)
        return True


def message_process(
    message: Message, collaborators: Collaborators, **kwargs: Any
) -> PassState:
    """
    Process the #!directives of a message

    The single entry point for every caller (a save hook, a standalone
    processor, a test). Keyword arguments are passed to Interpreter.

    Example:
        state = message_process(status, collaborators)
        state.text  # the rewritten text, already saved on status
    """
    return Interpreter(message, collaborators, **kwargs).process()
