"""Command line interface for web-research-agent."""

from __future__ import annotations

import logging
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_version
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
from rich.console import Console
from rich.table import Table

from .browser.playwright_session import PlaywrightBrowserSession
from .config import load_config
from .factory import build_browser, build_notifier, build_oracle, build_registry
from .llm.base import OracleError
from .orchestrator.runner import OrchestratorError, ResearchOrchestrator

app = typer.Typer(help="Web Research Agent entry point")


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """Configure logging before executing any command."""

    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@app.command()
def version() -> None:
    """Print the package version."""

    try:
        typer.echo(get_version("web-research-agent"))
    except PackageNotFoundError:  # pragma: no cover - when running from source tree
        typer.echo("0.0.0")


@app.command()
def research(
    instruction: Annotated[str, typer.Argument(help="What to research.")],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to YAML configuration."),
    ] = None,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Path to an .env file with default configuration values.",
        ),
    ] = None,
    max_steps: Annotated[
        Optional[int],
        typer.Option("--max-steps", min=1, help="Maximum oracle round-trips."),
    ] = None,
    llm_provider: Annotated[
        Optional[str],
        typer.Option("--llm-provider", help="LLM provider to use."),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", help="LLM model identifier."),
    ] = None,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", help="API key for the LLM provider."),
    ] = None,
    base_url: Annotated[
        Optional[str],
        typer.Option("--base-url", help="Base URL of an OpenAI-compatible API."),
    ] = None,
    headless: Annotated[
        Optional[bool],
        typer.Option("--headless/--headed", help="Run the browser in headless mode (or headed)."),
    ] = None,
) -> None:
    """Research a topic on the web and print the answer."""

    overrides: dict[str, Any] = {}
    if any([llm_provider, model, api_key, base_url]):
        overrides.setdefault("llm", {})
        if llm_provider:
            overrides["llm"]["provider"] = llm_provider
        if model:
            overrides["llm"]["model"] = model
        if api_key:
            overrides["llm"]["api_key"] = api_key
        if base_url:
            overrides["llm"]["base_url"] = base_url
    if headless is not None:
        overrides["browser"] = {"headless": headless}
    if max_steps is not None:
        overrides["max_steps"] = max_steps

    config = load_config(config_path, env_file=env_file, **overrides)

    oracle = build_oracle(config.llm)
    session = build_browser(config)
    registry = build_registry(session, config.browser)
    notifier = build_notifier(config.notifications)

    orchestrator = ResearchOrchestrator(
        oracle=oracle,
        session=session,
        registry=registry,
        max_steps=config.max_steps,
        notifier=notifier,
    )
    try:
        answer = orchestrator.run(instruction)
    except (OrchestratorError, OracleError) as exc:
        typer.echo(f"Research failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    typer.echo(answer)


@app.command()
def tools() -> None:
    """List the tools offered to the decision oracle."""

    registry = build_registry(PlaywrightBrowserSession(), load_config().browser)
    table = Table("Tool", "Arguments", "Description")
    for descriptor in registry.catalog():
        arguments = ", ".join(
            f"{param.name}: {param.type.value}" + ("" if param.required else " (optional)")
            for param in descriptor.parameters
        )
        table.add_row(descriptor.name, arguments or "-", descriptor.description)
    Console().print(table)


if __name__ == "__main__":
    app()
