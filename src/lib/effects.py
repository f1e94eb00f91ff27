"""
Deferred effect scheduler

Directives that must act on the message record around persistence queue
an Effect during the scan. Once the scan is complete, pre-save effects run
in queue order, the message is saved, then post-save effects run in queue
order. Each effect runs once.
"""

from typing import Callable, Dict, List

from ..config import appsettings
from ..models.message import Effect, EffectKind
from ..models.state import PassState
from .log import LOG, WARN


EffectHandler = Callable[[Effect, PassState], None]


def mediaDescription_write(effect: Effect, state: PassState) -> None:
    """Write a captured or assigned description onto the referenced attachment"""
    index = effect.target
    attachments = state.message.media_attachments
    if not isinstance(index, int) or not 1 <= index <= len(attachments):
        return
    name = effect.args[0] if effect.args else appsettings.mediaVar_make(index)
    if name not in state.variables:
        LOG(f"No description captured for attachment {index}; left unchanged", level=2)
        return
    attachment = attachments[index - 1]
    attachment.description = state.variables[name]
    attachment.save()
    LOG(f"Set description of attachment {index}", level=2)


def mention_create(effect: Effect, state: PassState) -> None:
    """Materialize a mention of an account on the saved message"""
    account = effect.target if effect.target is not None else state.message.author
    state.collaborators.mentions.find_or_create(state.message, account)
    LOG(f"Mentioned @{account.username}", level=2)


class EffectScheduler:
    """
    Queue of deferred effects for one pass

    Attributes:
        effects: Queued effects in order
        handlers: EffectKind -> handler
    """

    def __init__(self, effects: List[Effect]) -> None:
        """
        Args:
            effects: The pass state's effect list; queued effects are appended to it
        """
        self.effects = effects
        self.handlers: Dict[EffectKind, EffectHandler] = {
            EffectKind.MEDIA_DESCRIPTION: mediaDescription_write,
            EffectKind.MENTION: mention_create,
        }

    def effect_queue(self, effect: Effect) -> None:
        self.effects.append(effect)
        LOG(f"Queued {effect.kind.value} effect for {effect.target!r}", level=3)

    def effects_runPreSave(self, state: PassState) -> None:
        """Run every pre-save effect in queue order"""
        self.effects_run(state, presave=True)

    def effects_runPostSave(self, state: PassState) -> None:
        """Run every post-save effect in queue order"""
        self.effects_run(state, presave=False)

    def effects_run(self, state: PassState, presave: bool) -> None:
        for effect in self.effects:
            if effect.kind.presave != presave:
                continue
            handler = self.handlers.get(effect.kind)
            if handler is None:
                continue
            try:
                handler(effect, state)
            except Exception as e:
                WARN(f"Dropped {effect.kind.value} effect: {e}")
