# promq.repl.repl - Main REPL implementation
"""
Interactive PromQL prompt with live completion.
"""
from pathlib import Path
from typing import Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggestFromHistory
from prompt_toolkit.history import FileHistory
from prompt_toolkit.styles import Style

from promq.config import CompleteConfig
from promq.parser import PromQLParser
from promq.repl.commands import MetaCommandHandler
from promq.repl.completer import PromQLCompleter
from promq.session import PromQLSession
from promq.version import __version__


class Repl:
    """
    Interactive PromQL prompt.

    Features:
    - Completion while typing (grammar, Prometheus or language server)
    - Command history
    - Meta commands (/ prefixed)
    """

    # REPL prompt style
    STYLE = Style.from_dict({
        "prompt": "bold cyan",
        "rprompt": "gray",
    })

    def __init__(
        self,
        complete_config: Optional[CompleteConfig] = None,
        history_file: Optional[Path] = None,
        complete_while_typing: bool = True,
    ):
        """
        Initialize REPL.

        Args:
            complete_config: Completion source settings
            history_file: History file path
            complete_while_typing: Show completions on every keystroke
        """
        complete_config = (complete_config or CompleteConfig()).validated()

        self.session = PromQLSession(complete_config)
        self.parser = PromQLParser()
        self.meta_handler = MetaCommandHandler(self.session, complete_config)
        self.completer = PromQLCompleter(self.session, self.meta_handler)
        self.complete_while_typing = complete_while_typing

        # Setup history
        if history_file is None:
            history_file = Path.home() / ".promq_history"
        self.history = FileHistory(str(history_file))

        self.prompt_session: Optional[PromptSession] = None

    def _create_session(self) -> PromptSession:
        """Create prompt session."""
        return PromptSession(
            history=self.history,
            auto_suggest=AutoSuggestFromHistory(),
            completer=self.completer,
            style=self.STYLE,
            complete_while_typing=self.complete_while_typing,
        )

    def run(self) -> None:
        """Run the REPL."""
        self.prompt_session = self._create_session()

        print(self._get_banner())

        while True:
            try:
                line = self.prompt_session.prompt(
                    [("class:prompt", "promql> ")],
                    rprompt=self._get_rprompt(),
                )

                if not line or not line.strip():
                    continue

                if self.execute_line(line.strip()):
                    break

            except KeyboardInterrupt:
                print("\nUse /quit to exit")
                continue

            except EOFError:
                print("\nGoodbye!")
                break

    def execute_line(self, line: str) -> bool:
        """
        Execute a line of input.

        Args:
            line: Input line

        Returns:
            True if REPL should exit
        """
        if line.startswith("/"):
            parts = line[1:].split(None, 1)
            command = parts[0] if parts else ""
            args = parts[1].split() if len(parts) > 1 else []
            output, should_exit = self.meta_handler.execute(command, args)
            if output:
                print(output)
            return should_exit

        print(self.parser.parse(line).outline())
        return False

    def _get_banner(self) -> str:
        """Get welcome banner."""
        return f"""
promq v{__version__} - PromQL completion
Type /help for commands, /quit to exit
"""

    def _get_rprompt(self) -> str:
        """Get right prompt (completion source)."""
        return f"[{self.meta_handler.config.source}]"
