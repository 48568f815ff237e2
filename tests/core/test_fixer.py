"""
Tests for the textual Fixer.
"""

from js_switcheroo.core.diagnostics import Fix
from js_switcheroo.core.fixer import apply_fixes
from js_switcheroo.core.tracer import TraceEventType, TraceLogger


def test_applies_in_offset_order():
  text = "const { State } = Shopware;"
  fixes = [Fix(start=18, end=26, text="Sw"), Fix(start=8, end=13, text="Store")]
  outcome = apply_fixes(text, fixes)

  assert outcome.text == "const { Store } = Sw;"
  assert [f.start for f in outcome.applied] == [8, 18]
  assert outcome.skipped == []


def test_overlapping_fix_is_skipped():
  tracer = TraceLogger()
  outer = Fix(start=0, end=10, text="outer")
  inner = Fix(start=2, end=5, text="inner")
  outcome = apply_fixes("0123456789", [inner, outer], tracer)

  assert outcome.text == "outer"
  assert outcome.skipped == [inner]
  types = [e.type for e in tracer.events]
  assert TraceEventType.FIX_SKIPPED in types
  assert TraceEventType.FIX_APPLIED in types


def test_competing_insertions_at_same_offset():
  outcome = apply_fixes("ab", [Fix(start=1, end=1, text="x"), Fix(start=1, end=1, text="y")])

  assert outcome.text == "axb"
  assert len(outcome.skipped) == 1


def test_adjacent_fixes_both_apply():
  outcome = apply_fixes("abcd", [Fix(start=0, end=2, text="X"), Fix(start=2, end=4, text="Y")])
  assert outcome.text == "XY"


def test_out_of_range_fix_is_dropped():
  outcome = apply_fixes("abc", [Fix(start=2, end=10, text="x")])

  assert outcome.text == "abc"
  assert outcome.applied == []


def test_deletion():
  outcome = apply_fixes("a();\nb();\n", [Fix(start=0, end=5)])
  assert outcome.text == "b();\n"
