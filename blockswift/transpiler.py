"""JavaScript to Swift conversion by ordered textual rewriting.

The conversion is a straight pipeline: every rule group in
:data:`blockswift.rules.RULE_GROUPS` runs once, in order, over the text
produced by the group before it.  Nothing is parsed, so unusual input simply
passes through unchanged or comes out as imperfect Swift.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from .rules import RULE_GROUPS
from .structures import RuleGroup, SourceText, TranslatedText

TraceHook = Callable[[str, str, str], None]


class Transpiler:
    """Applies rule groups in sequence and optionally reports each change."""

    def __init__(
        self,
        groups: Sequence[RuleGroup] = RULE_GROUPS,
        *,
        trace: Optional[TraceHook] = None,
    ) -> None:
        self.groups = tuple(groups)
        self.trace = trace

    def translate(self, source: SourceText) -> TranslatedText:
        if not source or not source.strip():
            return ""

        text = source
        for group in self.groups:
            rewritten = group.apply(text)
            if self.trace is not None and rewritten != text:
                self.trace(group.name, text, rewritten)
            text = rewritten
        return text


_DEFAULT = Transpiler()


def translate(source: SourceText) -> TranslatedText:
    """Convert generated JavaScript into Swift source text."""

    return _DEFAULT.translate(source)
