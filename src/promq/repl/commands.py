# promq.repl.commands - Meta command handlers
"""
Handles / prefixed meta commands in the REPL.
"""
from typing import Callable

from promq.config.config import COMPLETE_SOURCES, SOURCE_ALIASES, CompleteConfig
from promq.parser import PromQLParser


class MetaCommandHandler:
    """
    Handles meta commands (/ prefixed) in the REPL.

    Meta commands:
    - /source [offline | prometheus <url> | lsp <url>] - Show or switch completion source
    - /tree <query> - Show the syntax tree of a query
    - /complete <query> - Complete at the end of a query
    - /help [command] - Show help
    - /quit - Exit REPL
    """

    def __init__(self, session, config: CompleteConfig):
        """
        Initialize handler.

        Args:
            session: The completion session
            config: Completion settings the session started with
        """
        self.session = session
        self.config = config
        self.parser = PromQLParser()

        # Command registry
        self.commands: dict[str, Callable] = {
            "source": self.cmd_source,
            "tree": self.cmd_tree,
            "complete": self.cmd_complete,
            "help": self.cmd_help,
            "quit": self.cmd_quit,
            "exit": self.cmd_quit,
            "q": self.cmd_quit,
        }

        self.help_text: dict[str, str] = {
            "source": "Show or switch completion source: /source [offline|prometheus <url>|lsp <url>]",
            "tree": "Show the syntax tree of a query: /tree <query>",
            "complete": "Complete at the end of a query: /complete <query>",
            "help": "Show help: /help [command]",
            "quit": "Exit the REPL",
        }

    def execute(self, command: str, args: list[str]) -> tuple[str, bool]:
        """
        Execute a meta command.

        Args:
            command: Command name (without /)
            args: Command arguments

        Returns:
            Tuple of (output_message, should_exit)
        """
        handler = self.commands.get(command.lower())
        if not handler:
            return f"Unknown command: /{command}", False

        try:
            return handler(args)
        except Exception as e:
            return f"Error: {e}", False

    def list_commands(self) -> list[str]:
        """Get list of unique command names."""
        return list(self.help_text.keys())

    def get_help_short(self, command: str) -> str:
        """Get short help for command."""
        return self.help_text.get(command, "")

    # Command implementations

    def cmd_source(self, args: list[str]) -> tuple[str, bool]:
        """Show or switch the completion source."""
        if not args:
            url = f" ({self.config.url})" if self.config.url else ""
            return f"Completion source: {self.config.source}{url}", False

        source = SOURCE_ALIASES.get(args[0].lower(), args[0].lower())
        if source not in COMPLETE_SOURCES:
            return f"Unknown source: {args[0]} (choose from {', '.join(COMPLETE_SOURCES)})", False

        config = CompleteConfig(
            source=source,
            url=args[1] if len(args) > 1 else "",
            limit=self.config.limit,
            timeout=self.config.timeout,
        ).validated()
        self.session.set_complete(config)
        self.config = config
        return self.cmd_source([])

    def cmd_tree(self, args: list[str]) -> tuple[str, bool]:
        """Show the syntax tree of a query."""
        if not args:
            return "Usage: /tree <query>", False
        return self.parser.parse(" ".join(args)).outline(), False

    def cmd_complete(self, args: list[str]) -> tuple[str, bool]:
        """Complete at the end of a query."""
        query = " ".join(args)
        result = self.session.complete_sync(query, len(query))
        if result is None:
            return "Nothing to complete here.", False
        return result.format_text(), False

    def cmd_help(self, args: list[str]) -> tuple[str, bool]:
        """Show help."""
        if args:
            cmd = args[0].lstrip("/")
            if cmd in self.help_text:
                return self.help_text[cmd], False
            return f"Unknown command: {cmd}", False

        lines = [
            "Type a PromQL query; completions show up while typing.",
            "Enter prints the syntax tree of the query.",
            "",
            "Meta commands:",
        ]
        for cmd, help_text in self.help_text.items():
            lines.append(f"  /{cmd:<10} {help_text}")
        return "\n".join(lines), False

    def cmd_quit(self, args: list[str]) -> tuple[str, bool]:
        """Exit the REPL."""
        return "Goodbye!", True
