"""Click implementation of the reconciliation prompts."""

from typing import Any, Optional

import click

from ledgersync.domain.reconciliation import Chooser, Option


class ClickChooser(Chooser):
    """Chooser that asks on the terminal through click prompts."""

    def select(self, prompt: str, options: list[Option]) -> Any:
        """Show a numbered list and return the value of the picked entry."""
        if not options:
            raise ValueError("Nothing to choose from")

        click.echo(f"\n{prompt}")
        for number, option in enumerate(options, start=1):
            line = f"  {number:3d}) {option.label}"
            if option.description:
                line += click.style(f"  ({option.description})", dim=True)
            click.echo(line)

        choice = click.prompt(
            "Choice", type=click.IntRange(1, len(options)), prompt_suffix=": "
        )
        return options[choice - 1].value

    def confirm(self, prompt: str, default: bool = False) -> bool:
        return click.confirm(prompt, default=default)

    def text_input(self, prompt: str, default: Optional[str] = None) -> str:
        while True:
            value = click.prompt(prompt, default=default or None, type=str).strip()
            if value:
                return value
            click.echo("A value is required.", err=True)
