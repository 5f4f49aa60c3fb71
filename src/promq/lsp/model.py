# promq.lsp.model - Language server completion payloads
"""
Response items of the language server completion endpoint.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass
class Position:
    """0-based line/character position."""
    line: int
    character: int

    @classmethod
    def from_dict(cls, data: dict) -> "Position":
        return cls(line=int(data["line"]), character=int(data["character"]))


@dataclass
class Range:
    start: Position
    end: Position

    @classmethod
    def from_dict(cls, data: dict) -> "Range":
        return cls(
            start=Position.from_dict(data["start"]),
            end=Position.from_dict(data["end"]),
        )


@dataclass
class TextEdit:
    """Replacement computed by the server."""
    range: Range
    new_text: str

    @classmethod
    def from_dict(cls, data: dict) -> "TextEdit":
        return cls(range=Range.from_dict(data["range"]), new_text=str(data["newText"]))


@dataclass
class AutocompleteResponse:
    """One completion item."""
    label: str
    text_edit: Optional[TextEdit] = None

    @classmethod
    def from_dict(cls, data: dict) -> "AutocompleteResponse":
        text_edit = data.get("textEdit")
        return cls(
            label=str(data["label"]),
            text_edit=TextEdit.from_dict(text_edit) if text_edit else None,
        )
