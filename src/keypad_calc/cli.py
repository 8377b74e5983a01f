"""
Command-line interface for Keypad Calc.

Provides commands for:
- Evaluating a chained expression
- Replaying token or keyboard key sequences
- Running an interactive keypad
- Running the API server
"""

from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from keypad_calc.accumulator import Calculator
from keypad_calc.config import apply_overrides, configure_logging, load_yaml_config, settings
from keypad_calc.evaluator import ERROR_TOKEN, evaluate, format_result
from keypad_calc.keymap import NAMED_KEYS
from keypad_calc.models import InvalidTokenError, Token

app = typer.Typer(
    name="calc",
    help="Keypad Calc - chained left-to-right calculator",
    add_completion=False,
)

console = Console()

# Shell-friendly spellings for tokens and keys that are awkward to type
TOKEN_ALIASES = {
    "bs": Token.BACKSPACE,
    "back": Token.BACKSPACE,
    "c": Token.CLEAR,
    "clear": Token.CLEAR,
}

KEY_ALIASES = {
    "enter": "Enter",
    "=": "Enter",
    "esc": "Escape",
    "escape": "Escape",
    "c": "Escape",
    "bs": "Backspace",
    "backspace": "Backspace",
}

EXIT_WORDS = {"quit", "exit", "q"}


@app.callback()
def main(
    config: Optional[Path] = typer.Option(None, "--config", help="YAML settings file"),
    log_level: Optional[str] = typer.Option(None, "--log-level", "-L", help="Log level"),
):
    """Load settings overrides and configure logging."""
    if config is not None:
        if not config.exists():
            console.print(f"[red]Config file not found: {config}[/]")
            raise typer.Exit(1)
        try:
            apply_overrides(load_yaml_config(config))
        except ValidationError as e:
            console.print(f"[red]Invalid settings in {config}:[/]")
            console.print(str(e), markup=False)
            raise typer.Exit(1)
    configure_logging(level=log_level)


# =============================================================================
# Evaluation Commands
# =============================================================================

@app.command("eval")
def eval_(
    expression: str = typer.Argument(..., help='Chained expression, e.g. "2 + 3 * 4"'),
):
    """Evaluate an expression strictly left to right."""
    display = format_result(evaluate(expression))
    if display == ERROR_TOKEN:
        console.print(f"[red]{display}[/]")
        raise typer.Exit(1)
    console.print(display)


@app.command()
def press(
    tokens: List[str] = typer.Argument(..., help="Tokens: 0-9 . + - * / % = C ←"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show every step"),
):
    """Press keypad tokens in order, starting from a clear display."""
    try:
        parsed = [_resolve_token(token) for token in tokens]
    except InvalidTokenError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(1)

    calculator = Calculator()
    steps = [(token.value, calculator.press(token)) for token in parsed]
    _print_result(calculator, steps if trace else None)


@app.command()
def keys(
    key_names: List[str] = typer.Argument(..., metavar="KEYS", help="Keyboard keys, e.g. 5 + 3 Enter"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show every step"),
):
    """Press keyboard keys in order; unmapped keys are ignored."""
    calculator = Calculator()
    steps = []
    for key in key_names:
        key = KEY_ALIASES.get(key.lower(), key)
        display = calculator.press_key(key)
        steps.append((key, display if display is not None else "[dim](ignored)[/]"))
    _print_result(calculator, steps if trace else None)


# =============================================================================
# Interactive Keypad
# =============================================================================

@app.command()
def repl():
    """Run an interactive keypad."""
    calculator = Calculator(sink=_render_display)

    console.print(
        "[dim]Type digits and operators, then Enter (empty line) to evaluate. "
        "'c' or Escape clears, 'bs' deletes, 'quit' exits.[/]"
    )
    _render_display(calculator.display)

    while True:
        try:
            line = console.input("[bold cyan]key>[/] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break

        if line.strip().lower() in EXIT_WORDS:
            break

        for key in line_to_keys(line):
            calculator.press_key(key)


def line_to_keys(line: str) -> list[str]:
    """
    Split one REPL line into keyboard keys.

    An empty line is Enter; a whole-line key name or alias is that key;
    anything else is pressed one character at a time.
    """
    stripped = line.strip()
    if not stripped:
        return ["Enter"]
    if stripped in NAMED_KEYS:
        return [stripped]
    if stripped.lower() in KEY_ALIASES:
        return [KEY_ALIASES[stripped.lower()]]
    return [KEY_ALIASES.get(char, char) for char in stripped if not char.isspace()]


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", "-h", help="Host to bind to"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload"),
):
    """Start the Keypad Calc API server."""
    import uvicorn

    host = host or settings.host
    port = port or settings.port
    console.print(f"[bold green]Starting {settings.app_name} server on {host}:{port}[/]")

    uvicorn.run(
        "keypad_calc.api:app",
        host=host,
        port=port,
        reload=reload,
    )


# =============================================================================
# Helpers
# =============================================================================

def _resolve_token(raw: str) -> Token:
    """Resolve a command-line token, accepting aliases."""
    alias = TOKEN_ALIASES.get(raw.lower())
    if alias is not None:
        return alias
    return Token.parse(raw)


def _render_display(display: str) -> None:
    style = "red" if display == ERROR_TOKEN else "bold green"
    console.print(Panel(f"[{style}]{display}[/]", expand=False, title="display"))


def _print_result(calculator: Calculator, steps: Optional[list] = None) -> None:
    if steps is not None:
        table = Table(title="Steps")
        table.add_column("#", style="dim")
        table.add_column("Input", style="cyan")
        table.add_column("Display", style="green")
        for number, (entry, display) in enumerate(steps, start=1):
            table.add_row(str(number), entry, display)
        console.print(table)

    if calculator.is_error:
        console.print(f"[red]{calculator.display}[/]")
        raise typer.Exit(1)
    console.print(calculator.display)


if __name__ == "__main__":
    app()
