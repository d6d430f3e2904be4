"""CLI interface for chatsplitter."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from chatsplitter.config import SplitterConfig, load_config, load_conversation
from chatsplitter.errors import SplitterError
from chatsplitter.utils.logging import setup_logging

console = Console()


def _run_async(coro):
    """Run an async function from sync CLI."""
    return asyncio.run(coro)


def _resolve_config(
    config_path: Optional[str],
    overrides: dict,
) -> SplitterConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = load_config(Path(config_path)) if config_path else SplitterConfig()
    updates = {k: v for k, v in overrides.items() if v is not None}
    if not updates:
        return config
    return SplitterConfig(**{**config.model_dump(), **updates})


@click.group()
@click.version_option(version="0.1.0")
def main():
    """chatsplitter — keep chat requests inside the model's context window."""
    pass


@main.command()
@click.argument("conversation", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="YAML settings file")
@click.option("--model", "-m", type=str, default=None, help="Model identifier")
@click.option("--max-output-tokens", "-t", type=int, default=None, help="Tokens reserved for the completion")
@click.option("--max-turns", "-n", type=int, default=None, help="Maximum messages in the recent window")
@click.option(
    "--estimator",
    "-e",
    type=click.Choice(["tiktoken", "approximate"]),
    default=None,
    help="Token estimator",
)
@click.option("--json", "as_json", is_flag=True, help="Print the split as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
def split(
    conversation: str,
    config_path: Optional[str],
    model: Optional[str],
    max_output_tokens: Optional[int],
    max_turns: Optional[int],
    estimator: Optional[str],
    as_json: bool,
    verbose: bool,
):
    """Split a stored conversation into outdated and recent messages."""
    setup_logging(verbose)
    config = _resolve_config(
        config_path,
        {
            "model": model,
            "max_output_tokens": max_output_tokens,
            "max_turns": max_turns,
            "estimator": estimator,
        },
    )
    messages = load_conversation(Path(conversation))
    policy = config.build_policy()

    try:
        report = policy.split_with_report(messages)
    except SplitterError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                {
                    "model": policy.model,
                    "outdated": len(report.outdated),
                    "recent": list(report.recent),
                    "remaining_tokens": report.remaining_tokens,
                    "output_reservation": report.output_reservation,
                    "token_budget_met": report.token_budget_met,
                    "estimator_calls": report.estimator_calls,
                },
                indent=2,
            )
        )
        return

    table = Table(title=f"Split for {policy.model}")
    table.add_column("Field")
    table.add_column("Value", justify="right")
    table.add_row("Messages", str(len(messages)))
    table.add_row("Outdated", str(len(report.outdated)))
    table.add_row("Recent", str(len(report.recent)))
    table.add_row("Reserved for output", str(report.output_reservation))
    table.add_row("Tokens left", str(report.remaining_tokens))
    table.add_row("Estimator calls", str(report.estimator_calls))
    console.print(table)
    if not report.token_budget_met:
        console.print(
            "[yellow]![/yellow] The newest message alone leaves less than "
            "the reserved output tokens."
        )


@main.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="YAML settings file")
@click.option("--model", "-m", type=str, default=None, help="Model identifier")
@click.option("--max-output-tokens", "-t", type=int, default=None, help="Tokens reserved for the completion")
@click.option("--max-turns", "-n", type=int, default=None, help="Maximum messages in the recent window")
@click.option("--system", "-s", "system_prompt", type=str, default=None, help="System prompt")
@click.option("--api-key", "-k", type=str, default=None, help="OpenAI API key (avoids storing in files)")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
def chat(
    config_path: Optional[str],
    model: Optional[str],
    max_output_tokens: Optional[int],
    max_turns: Optional[int],
    system_prompt: Optional[str],
    api_key: Optional[str],
    verbose: bool,
):
    """Chat interactively; old turns fall out of the window as it grows."""
    setup_logging(verbose)
    config = _resolve_config(
        config_path,
        {
            "model": model,
            "max_output_tokens": max_output_tokens,
            "max_turns": max_turns,
            "system_prompt": system_prompt,
            "api_key": api_key,
        },
    )
    if not config.api_key:
        hint = f" (or set {config.api_key_env})" if config.api_key_env else ""
        config.api_key = click.prompt(
            f"Enter OpenAI API key{hint}", hide_input=True
        )

    async def _chat():
        from openai import AsyncOpenAI

        from chatsplitter.llm.session import ChatSession

        client = AsyncOpenAI(api_key=config.api_key, base_url=config.base_url)
        session = ChatSession(
            client=client,
            policy=config.build_policy(),
            system_prompt=config.system_prompt,
        )
        console.print(
            f"[bold]chatsplitter[/bold] — chatting with "
            f"[cyan]{config.model}[/cyan] (empty line to quit)"
        )
        while True:
            text = click.prompt("you", default="", show_default=False)
            if not text.strip():
                break
            try:
                reply = await session.ask(text)
            except SplitterError as e:
                console.print(f"[red]✗[/red] {e}")
                break
            console.print(f"[green]assistant[/green]: {reply.content or ''}")
            console.print(
                f"[dim]{len(session.memory.recent)} of "
                f"{len(session.memory)} messages in window[/dim]"
            )

    _run_async(_chat())


if __name__ == "__main__":
    main()
