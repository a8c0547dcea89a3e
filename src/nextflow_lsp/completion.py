"""
Maps LSP completion items to the labels rendered by the host.

A label consists of a piece of code (which the host syntax-highlights), a list of spans selecting what is
displayed, and the range of the code used for fuzzy filtering. All offsets are UTF-8 byte offsets into the code.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class CompletionKind(IntEnum):
    """
    The LSP CompletionItemKind.
    """

    TEXT = 1
    METHOD = 2
    FUNCTION = 3
    CONSTRUCTOR = 4
    FIELD = 5
    VARIABLE = 6
    CLASS = 7
    INTERFACE = 8
    MODULE = 9
    PROPERTY = 10
    UNIT = 11
    VALUE = 12
    ENUM = 13
    KEYWORD = 14
    SNIPPET = 15
    COLOR = 16
    FILE = 17
    REFERENCE = 18
    FOLDER = 19
    ENUM_MEMBER = 20
    CONSTANT = 21
    STRUCT = 22
    EVENT = 23
    OPERATOR = 24
    TYPE_PARAMETER = 25


@dataclass(frozen=True)
class Completion:
    label: str
    kind: CompletionKind | None = None
    detail: str | None = None

    @classmethod
    def from_lsp(cls, item: dict[str, Any]) -> "Completion":
        """
        :param item: a CompletionItem as sent by the language server
        """
        kind = item.get("kind")
        try:
            completion_kind = CompletionKind(kind) if kind is not None else None
        except ValueError:
            completion_kind = None
        return cls(label=item["label"], kind=completion_kind, detail=item.get("detail"))


@dataclass(frozen=True)
class CodeLabelSpan:
    """
    Either a byte range of the label's code or a literal text (optionally with a highlight name).
    """

    code_range: tuple[int, int] | None = None
    literal_text: str | None = None
    highlight_name: str | None = None

    @classmethod
    def code(cls, start: int, end: int) -> "CodeLabelSpan":
        return cls(code_range=(start, end))

    @classmethod
    def literal(cls, text: str, highlight_name: str | None = None) -> "CodeLabelSpan":
        return cls(literal_text=text, highlight_name=highlight_name)

    @property
    def is_literal(self) -> bool:
        return self.literal_text is not None


@dataclass(frozen=True)
class CodeLabel:
    code: str
    spans: list[CodeLabelSpan] = field(default_factory=list)
    filter_range: tuple[int, int] = (0, 0)

    def _slice(self, start: int, end: int) -> str:
        return self.code.encode("utf-8")[start:end].decode("utf-8")

    def text(self) -> str:
        """
        :return: the text displayed by the host
        """
        parts = []
        for span in self.spans:
            if span.is_literal:
                parts.append(span.literal_text)
            else:
                parts.append(self._slice(*span.code_range))
        return "".join(parts)

    def filter_text(self) -> str:
        return self._slice(*self.filter_range)


def _byte_len(s: str) -> int:
    return len(s.encode("utf-8"))


def label_for_completion(completion: Completion) -> CodeLabel | None:
    """
    :return: the label to render, or None to let the host fall back to its default rendering
    """
    label_len = _byte_len(completion.label)
    match completion.kind:
        case CompletionKind.CLASS | CompletionKind.ENUM | CompletionKind.INTERFACE:
            if not completion.detail:
                return None
            return CodeLabel(
                code=f"{completion.label} variable",
                spans=[CodeLabelSpan.code(0, label_len), CodeLabelSpan.literal(f" (import {completion.detail})")],
                filter_range=(0, label_len),
            )
        case CompletionKind.METHOD:
            code = f"{completion.label}()"
            return CodeLabel(code=code, spans=[CodeLabelSpan.code(0, _byte_len(code))], filter_range=(0, label_len))
        case CompletionKind.VARIABLE:
            prefix = "def "
            code = f"{prefix}{completion.label}"
            label_range = (_byte_len(prefix), _byte_len(code))
            return CodeLabel(code=code, spans=[CodeLabelSpan.code(*label_range)], filter_range=label_range)
        case _:
            return None
