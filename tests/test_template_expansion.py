"""
Tests for template expansion.
Covers literal replay, escapes, repeated expansion against changing context,
format-state restoration, and error propagation.
"""

import io
import threading

import pytest

from substituter import FieldRef, Live, Snapshot, Substituter, SubstituterConfig
from substituter.exceptions import ContextMismatchError, TemplateParseError
from substituter.sink import FormatState, OutputSink


class CtxA:
    def __init__(self):
        self.y = 0


class CtxB:
    def __init__(self):
        self.x = 0


@pytest.fixture
def subst():
    """Substituter over (CtxA, CtxB) with x from B and y from A."""
    subst = Substituter(CtxA, CtxB)
    subst['x'] = FieldRef(CtxB, 'x')
    subst['y'] = FieldRef(CtxA, 'y')
    return subst


class TestExpansion:
    """Test expansion output."""

    def test_repeated_expansion_with_changing_context(self, subst):
        """One template, three expansions, context mutated in between."""
        templ = subst.freeze().parse("<@x:@y>\n")
        a, b = CtxA(), CtxB()
        out = io.StringIO()

        for _ in range(3):
            templ.expand(out, a, b)
            a.y += 1
            b.x += 2

        assert out.getvalue() == "<0:0>\n<2:1>\n<4:2>\n"

    def test_text_without_references_is_unchanged(self, subst):
        text = "no references { here } at all"
        templ = subst.parse(text)

        assert templ.render(CtxA(), CtxB()) == text
        a, b = CtxA(), CtxB()
        a.y, b.x = 99, 42
        assert templ.render(a, b) == text

    def test_double_at_expands_to_single_at(self, subst):
        templ = subst.parse("user@@host @@@@ @x@@")

        assert templ.render(CtxA(), CtxB()) == "user@host @@ 0@"

    def test_shorthand_and_braced_forms_are_equivalent(self, subst):
        b = CtxB()
        b.x = 17

        short = subst.parse("[@x]").render(CtxA(), b)
        braced = subst.parse("[@{x}]").render(CtxA(), b)

        assert short == braced == "[17]"

    def test_expand_into_output_sink(self, subst):
        out = OutputSink()
        subst.parse("@x").expand(out, CtxA(), CtxB())
        assert out.getvalue() == "0"

    def test_live_and_snapshot_values(self):
        state = {'level': 'info'}
        subst = Substituter()
        subst['l'] = Live.item(state, 'level')
        subst['v'] = Snapshot('1.0')
        templ = subst.parse("@v/@l")

        assert templ.render() == "1.0/info"
        state['level'] = 'debug'
        assert templ.render() == "1.0/debug"

    def test_context_arity_checked_before_output(self, subst):
        templ = subst.parse("prefix @x")
        out = io.StringIO()

        with pytest.raises(ContextMismatchError) as exc_info:
            templ.expand(out, CtxA())

        assert exc_info.value.expected == 2
        assert exc_info.value.got == 1
        assert out.getvalue() == ""

    def test_context_types_checked_before_output(self, subst):
        """Swapped context elements are rejected before any literal text is written."""
        templ = subst.parse("<@x:@y>\n")
        out = io.StringIO()

        with pytest.raises(ContextMismatchError) as exc_info:
            templ.expand(out, CtxB(), CtxA())

        assert exc_info.value.slot == 0
        assert exc_info.value.expected == 'CtxA'
        assert exc_info.value.got == 'CtxB'
        assert out.getvalue() == ""

    def test_context_subclass_accepted(self, subst):
        class LoggedB(CtxB):
            pass

        b = LoggedB()
        b.x = 5
        assert subst.parse("@x").render(CtxA(), b) == "5"

    def test_plain_object_without_write_rejected(self, subst):
        templ = subst.parse("@x")
        with pytest.raises(TypeError):
            templ.expand(object(), CtxA(), CtxB())


class TestRefersTo:
    """Test refers_to and referenced_names."""

    def test_only_resolved_names(self, subst):
        templ = subst.parse("@y only")

        assert templ.refers_to('y')
        assert not templ.refers_to('x')  # defined but not used here
        assert not templ.refers_to('@')
        assert not templ.refers_to('z')

    def test_referenced_names_in_first_use_order(self, subst):
        templ = subst.parse("@y @x @y @@")
        assert templ.referenced_names() == ['y', 'x']


class TestFormatState:
    """Test that evaluator formatting never leaks."""

    def test_format_restored_between_variables(self):
        subst = Substituter()

        def hex_value(out):
            out.set_format(format_spec='x')
            out.write(255)

        subst['h'] = hex_value
        subst['n'] = Snapshot(255)
        templ = subst.parse("@h @n")

        out = OutputSink()
        templ.expand(out)

        assert out.getvalue() == "ff 255"
        assert out.format_state == FormatState()

    def test_caller_format_state_applies_and_survives(self):
        subst = Substituter()
        subst['n'] = Snapshot(3.14159)

        def rounded(out):
            out.set_format(format_spec='.1f')
            out.write(2.0)

        subst['p'] = rounded
        templ = subst.parse("@n @p @n")

        out = OutputSink(format_state=FormatState(format_spec='.3f'))
        templ.expand(out)

        assert out.getvalue() == "3.142 2.0 3.142"
        assert out.format_state.format_spec == '.3f'

    def test_format_restored_when_evaluator_fails(self):
        subst = Substituter()

        def broken(out):
            out.set_format(boolalpha=False)
            raise RuntimeError("evaluator failed")

        subst['b'] = broken
        subst['t'] = Snapshot(True)
        out = OutputSink()

        with pytest.raises(RuntimeError, match="evaluator failed"):
            subst.parse("before @b after").expand(out)

        assert out.getvalue() == "before "
        assert out.format_state.boolalpha is True

        subst.parse("@t").expand(out)
        assert out.getvalue() == "before true"


class TestFacade:
    """Test Substituter-level conveniences."""

    def test_expand_text_directly(self, subst):
        out = io.StringIO()
        assert subst.expand("<@x>", out, CtxA(), CtxB()) is True
        assert out.getvalue() == "<0>"

    def test_expand_text_strict_failure_writes_nothing(self, subst):
        out = io.StringIO()
        assert subst.expand("<@{missing}>", out, CtxA(), CtxB()) is False
        assert out.getvalue() == ""

    def test_failed_strict_parse_keeps_previous_template(self, subst):
        templ = subst.parse("@x")
        try:
            templ = subst.parse("@{missing}")
        except TemplateParseError:
            pass

        assert templ.text == "@x"

    def test_lenient_config(self):
        subst = Substituter(config=SubstituterConfig(lenient=True))
        assert subst.lenient
        assert subst.parse("@{missing} and @").render() == "@{missing} and @"


class TestConcurrency:
    """Test shared templates under concurrent expansion."""

    def test_concurrent_expansion(self, subst):
        templ = subst.freeze().parse("@x:@y")
        results = {}

        def worker(n):
            a, b = CtxA(), CtxB()
            a.y, b.x = n, n * 10
            results[n] = [templ.render(a, b) for _ in range(50)]

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for n in range(8):
            assert set(results[n]) == {f"{n * 10}:{n}"}
