"""
Rich-enhanced Click command for the precabal front end.

This module defines:
- `rich_help`: builds Rich markup help text for a command.
- `RichCommand`: a Click command that renders its help through Rich.

Features:
- Displays the help text in a bordered panel.
- Lists arguments and options with colorized names.
"""

from rich.console import Console
from rich.panel import Panel
import click

console: Console = Console()


def rich_help(description: str, usage: str, args: dict[str, str]) -> str:
    """
    Generate Rich-enhanced help text for commands.

    :param description: Description of the command.
    :param usage: Usage syntax for the command.
    :param args: Dictionary of arguments and their descriptions.
    :return: Formatted Rich help string.
    """
    help_text = f"[bold cyan]{description}[/bold cyan]\n\n"
    help_text += f"[bold yellow]Usage:[/bold yellow]\n    [green]{usage}[/green]\n\n"
    help_text += "[bold yellow]Arguments:[/bold yellow]\n"
    for arg, desc in args.items():
        help_text += f"    [green]{arg}[/green]: {desc}\n"
    return help_text


class RichCommand(click.Command):
    """
    A Click Command that uses Rich for rendering help messages.

    Methods:
        format_help(ctx, formatter): Renders the command-level help message with Rich formatting.
    """

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        """
        Render the help message for the command using Rich.

        :param ctx: The Click context for the command.
        :param formatter: The Click help formatter.
        """
        help_text = (self.help or "No help text available.").strip()
        panel_width = max(len(line) for line in help_text.splitlines()) + 10
        panel_width = min(panel_width, 80)  # Cap the width to avoid excessive size
        console.print(Panel(help_text, expand=False, width=panel_width, border_style="cyan"))

        options = [param for param in self.get_params(ctx) if isinstance(param, click.Option)]
        if options:
            console.print("[bold yellow]Options:[/bold yellow]")
            for option in options:
                names = ", ".join(option.opts + option.secondary_opts)
                console.print(
                    f"- [cyan]{names}[/cyan]: {option.help or 'No description'}",
                    highlight=False,
                )
