"""Interactive prompts for treework, rendered with rich."""

from typing import Optional, Sequence, Tuple

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from treework.constants import Style
from treework.exceptions import UserAbort

BACK_CHOICE = "0"


class ConsolePrompter:
    """Prompter that asks on the terminal.

    Ctrl+C and end-of-input raise ``UserAbort``.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def confirm(self, message: str, default: bool = False) -> bool:
        try:
            return Confirm.ask(escape(message), default=default, console=self.console)
        except (KeyboardInterrupt, EOFError) as e:
            raise UserAbort() from e

    def select(
        self, title: str, options: Sequence[Tuple[str, str]], allow_back: bool = True
    ) -> Optional[str]:
        """Show a numbered menu and return the chosen value, or None for back."""
        self.console.print(f"[bold]{escape(title)}[/bold]")
        if allow_back:
            self.console.print(f"  [{Style.MUTED}]{BACK_CHOICE}) ← Back[/{Style.MUTED}]")
        for number, (label, _value) in enumerate(options, start=1):
            self.console.print(f"  {number}) {escape(label)}")

        choices = [str(n) for n in range(1, len(options) + 1)]
        if allow_back:
            choices.insert(0, BACK_CHOICE)

        try:
            answer = Prompt.ask("Choose", choices=choices, show_choices=False, console=self.console)
        except (KeyboardInterrupt, EOFError) as e:
            raise UserAbort() from e

        if answer == BACK_CHOICE and allow_back:
            return None
        return options[int(answer) - 1][1]

    def ask(self, message: str, default: Optional[str] = None) -> str:
        try:
            if default is None:
                return Prompt.ask(escape(message), console=self.console)
            return Prompt.ask(escape(message), default=default, console=self.console)
        except (KeyboardInterrupt, EOFError) as e:
            raise UserAbort() from e
