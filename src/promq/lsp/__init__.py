# promq.lsp - Language server completion
from promq.lsp.client import LSPClient, LSPComplete
from promq.lsp.model import AutocompleteResponse, Position, Range, TextEdit

__all__ = [
    "LSPClient",
    "LSPComplete",
    "AutocompleteResponse",
    "Position",
    "Range",
    "TextEdit",
]
