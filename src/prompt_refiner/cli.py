"""CLI interface using typer + rich."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.panel import Panel

from prompt_refiner.clients.llm_client import LLMClient
from prompt_refiner.config import AppConfig, load_config
from prompt_refiner.errors import MissingCredentialError, PromptRefinerError
from prompt_refiner.models.prompt import (
    ImprovementRequest,
    ImprovementResult,
    StructuredFields,
)
from prompt_refiner.pipeline.prompt_improver import PromptImprover

app = typer.Typer(
    name="prompt-refiner",
    help="Turn vague ideas into structured Golden Prompts",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    # SDK internals are noisy at DEBUG
    for name in ("anthropic", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def _build_improver(config: AppConfig) -> tuple[LLMClient, PromptImprover]:
    llm = LLMClient(timeout=config.llm.timeout, max_retries=config.llm.max_retries)
    improver = PromptImprover(
        llm,
        model=config.llm.model,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    return llm, improver


def _read_prompt_file(path: Path) -> str:
    if not path.exists():
        console.print(f"[red]Prompt file not found: {path}[/red]")
        raise typer.Exit(1)
    return path.read_text(encoding="utf-8").strip()


def _show_result(result: ImprovementResult, output: Path | None) -> None:
    console.print(Panel(Markdown(result.improved_prompt), title="Golden Prompt", border_style="green"))
    console.print(Panel(result.explanation, title="Why I Changed This", border_style="blue"))

    missing = result.missing_sections()
    if missing:
        console.print(f"[yellow]Missing sections: {', '.join(missing)}[/yellow]")

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.improved_prompt, encoding="utf-8")
        console.print(f"[green]Saved: {output}[/green]")


def _show_usage(llm: LLMClient) -> None:
    summary = llm.get_token_summary()
    console.print(
        f"[dim]Tokens: {summary['input']} in / {summary['output']} out "
        f"({len(summary['calls'])} calls)[/dim]"
    )


@app.command()
def improve(
    idea: str = typer.Argument("", help="Free-text idea (instant mode)"),
    task: str = typer.Option("", "--task", help="What should the AI do?"),
    role: str = typer.Option("", "--role", help="Who is the AI acting as?"),
    context: str = typer.Option("", "--context", help="Background information, data, or constraints"),
    instructions: str = typer.Option("", "--instructions", help="Step-by-step requirements"),
    format_: str = typer.Option("", "--format", help="Table, Markdown, Code, etc."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the Golden Prompt to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Rewrite an idea into a five-section Golden Prompt.

    Pass a free-text IDEA, or build the prompt from structured fields:

      prompt-refiner improve "blog post about AI in healthcare"

      prompt-refiner improve --task "Write a blog post" --role "Tech journalist"
    """
    _setup_logging(verbose)
    fields = StructuredFields(
        task=task, role=role, context=context, instructions=instructions, format=format_
    )
    if fields.to_prompt_text():
        request = ImprovementRequest(structured=fields)
    else:
        request = ImprovementRequest(idea=idea)

    if request.is_empty:
        console.print("[red]Nothing to improve: pass an idea or at least one field.[/red]")
        raise typer.Exit(1)

    config = load_config()
    llm, improver = _build_improver(config)

    try:
        with console.status("Transmuting..."):
            result = asyncio.run(improver.improve_prompt(request))
    except MissingCredentialError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except PromptRefinerError:
        console.print("[red]Failed to generate prompt. Please try again.[/red]")
        raise typer.Exit(1)

    _show_result(result, output)
    if verbose:
        _show_usage(llm)


@app.command()
def questions(
    prompt_file: Path = typer.Argument(help="File containing the current prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Show clarifying questions that would sharpen a prompt."""
    _setup_logging(verbose)
    prompt = _read_prompt_file(prompt_file)

    config = load_config()
    llm, improver = _build_improver(config)

    try:
        with console.status("Thinking of questions..."):
            qs = asyncio.run(improver.get_clarifying_questions(prompt))
    except MissingCredentialError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    for i, q in enumerate(qs, 1):
        console.print(f"  {i}. {q}")
    if verbose:
        _show_usage(llm)


@app.command()
def refine(
    prompt_file: Path = typer.Argument(help="File containing the prompt to refine"),
    answer: list[str] = typer.Option(None, "--answer", "-a", help="Answer to a clarifying question (repeatable, in order)"),
    additional: str = typer.Option("", "--additional", help="Additional instructions for the rewrite"),
    output: Path = typer.Option(None, "--output", "-o", help="Write the refined prompt to this file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Answer clarifying questions and regenerate the prompt.

    Answers are taken from --answer options when their count matches the
    questions; otherwise each question is asked interactively.
    """
    _setup_logging(verbose)
    prompt = _read_prompt_file(prompt_file)

    config = load_config()
    llm, improver = _build_improver(config)
    given = list(answer or [])

    async def _run() -> ImprovementResult:
        with console.status("Thinking of questions..."):
            qs = await improver.get_clarifying_questions(prompt)

        if len(given) == len(qs):
            answers = given
        else:
            if given:
                console.print(
                    f"[yellow]{len(given)} answers given for {len(qs)} questions; "
                    "asking interactively.[/yellow]"
                )
            answers = [typer.prompt(q, default="", show_default=False) for q in qs]

        with console.status("Refining..."):
            return await improver.refine_prompt(prompt, qs, answers, additional)

    try:
        result = asyncio.run(_run())
    except MissingCredentialError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    except PromptRefinerError:
        console.print("[red]Refinement failed. Please try again.[/red]")
        raise typer.Exit(1)

    _show_result(result, output)
    if verbose:
        _show_usage(llm)


if __name__ == "__main__":
    app()
