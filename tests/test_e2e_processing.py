"""
End-to-end processing tests

Tests the full pass: raw text → Tokenizer → Parser → dispatch → save →
effects, including pass-through, failure containment and per-pass state.
"""

import pytest

from bangtags import Interpreter, message_process
from bangtags.lib.directives import DirectiveRegistry
from bangtags.lib.tokenizer import MARKER_ESCAPED
from bangtags.models.directives import DirectiveCategory, DirectiveSpec
from bangtags.models.tables import SHRUG


class TestPassThrough:
    """Text without a marker is left alone"""

    def test_untouched_and_not_saved(self, world):
        """Text without a marker is neither changed nor saved"""
        message = world.process("plain words, no directives")
        assert message.text == "plain words, no directives"
        assert message.saves == 0
        assert world.events == []
        assert world.state.persisted is False

    def test_escaped_marker_survives(self, world):
        """An escaped marker still triggers a save"""
        message = world.process("type #!!shrug to shrug")
        assert message.text == "type " + MARKER_ESCAPED + "shrug to shrug"
        assert message.saves == 1


class TestFullPass:
    """Test complete messages"""

    def test_mixed_message(self, world):
        """Variables, transforms, text and tags combine in one message"""
        source = (
            "#!var:name:friend"
            "#!tf:gs:cat:dog Hello #!{var:name}, my cat says #!shrug"
            "#!tf:end cat#!tag:pets"
        )
        message = world.process(source)
        assert message.text == " Hello friend, my dog says " + SHRUG + " cat"
        assert message.tag_names == ["pets"]
        assert world.events == [("message", message.text)]

    def test_directive_case_insensitive(self, world):
        """Directive names ignore case"""
        message = world.process("#!SHRUG")
        assert message.text == SHRUG

    def test_unknown_directive_dropped(self, world):
        """An unknown directive emits nothing"""
        message = world.process("a #!frobnicate b")
        assert message.text == "a  b"

    def test_empty_bracket(self, world):
        """An empty bracket directive emits nothing"""
        message = world.process("#!{} x")
        assert message.text == " x"

    def test_state_reports_pass(self, world):
        """The returned state describes the pass"""
        world.process("#!var:x:1 hi")
        assert world.state.persisted is True
        assert world.state.text == " hi"
        assert world.state.variables == {"x": "1"}

    def test_no_state_between_passes(self, world):
        """Variables and scopes do not leak into the next pass"""
        world.process("#!var:x:1#!hide")
        message = world.process("#!var:x more")
        assert message.text == " more"


class TestFailureContainment:
    """A failing collaborator drops one directive or effect, not the pass"""

    def test_failing_directive(self, world):
        """A raising directive is dropped and the rest still runs"""
        class BrokenPermalinks:
            def url_for(self, message):
                raise RuntimeError("permalink service down")

        world.collaborators.permalinks = BrokenPermalinks()
        message = world.process("a #!permalink b #!shrug")
        assert message.text == "a  b " + SHRUG
        assert message.saves == 1

    def test_failing_post_save_effect(self, world):
        """A raising mention still leaves the message saved"""
        class BrokenMentions:
            def find_or_create(self, message, account):
                raise RuntimeError("mention table locked")

        world.collaborators.mentions = BrokenMentions()
        message = world.process("note #!draft")
        assert message.saves == 1
        assert world.state.persisted is True

    def test_failing_pre_save_effect(self, world):
        """A raising attachment save does not stop the message save"""
        message = world.message_make("#!media:1:desc:cat", attachments=1)

        def broken_save():
            raise RuntimeError("attachment store down")

        message.media_attachments[0].save = broken_save
        message_process(message, world.collaborators)
        assert message.saves == 1


class TestCustomRegistry:
    """Extra directives can be registered on a registry instance"""

    def test_custom_directive(self, world):
        """A directive registered on a new registry can be used"""
        registry = DirectiveRegistry()
        registry.register(DirectiveSpec(
            name='upper',
            category=DirectiveCategory.TEXT,
            description='Upper-case the arguments',
            handler=lambda command, interp: [a.upper() for a in command.args(1)],
        ))
        message = world.process("#!upper:a:b", interpreter={'registry': registry})
        assert message.text == "AB"

    def test_interpreter_reuses_given_parts(self, world):
        """An interpreter keeps the registry and verbosity it was given"""
        message = world.message_make("#!shrug")
        registry = DirectiveRegistry()
        interp = Interpreter(message, world.collaborators, registry=registry, verbosity=3)
        state = interp.process()
        assert interp.registry is registry
        assert state.verbosity == 3
        assert message.text == SHRUG
