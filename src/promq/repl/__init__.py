# promq.repl - REPL interface module
from promq.repl.repl import Repl
from promq.repl.completer import PromQLCompleter
from promq.repl.commands import MetaCommandHandler

__all__ = [
    "Repl",
    "PromQLCompleter",
    "MetaCommandHandler",
]
