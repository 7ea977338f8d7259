import asyncio
import json
import logging
import os

import click
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from memory_runtime.llm import ModelClient, StubModelClient, get_model_client
from memory_runtime.runtime import RuntimeConfig, Session, create_runtime
from memory_runtime.types import CompileResult

console = Console()
logger = logging.getLogger(__name__)

DEFAULT_STABLE_PREFIX = """You are a helpful coding assistant with access to repository context.

When you make decisions or identify constraints, use these markers:
- Decision: <your decision>
- Constraint: <identified constraint>
- Open: <open question>
- Glossary: term - definition

These will be extracted and tracked across the conversation."""


def _load_config(storage: str | None, budget: int | None, llm: str | None) -> RuntimeConfig:
    config = RuntimeConfig.from_env(storage_path=storage, budget_tokens=budget, llm_client=llm)
    if config.stable_prefix is None:
        config = config.model_copy(update={"stable_prefix": DEFAULT_STABLE_PREFIX})
    return config


def _print_debug(result: CompileResult, budget_tokens: int) -> None:
    debug = result.debug
    lines = [
        f"Token Estimate: [bold]{debug.token_estimate}[/bold] / {budget_tokens}",
        f"Included Artifacts: {len(debug.included_artifacts)}",
        f"Dropped Artifacts: {len(debug.dropped_artifacts)}",
    ]
    if debug.included_artifacts:
        short_ids = ", ".join(artifact_id[:8] for artifact_id in debug.included_artifacts)
        lines.append(f"Artifact IDs: [dim]{short_ids}[/dim]")
    console.print(Panel("\n".join(lines), title="Debug Info", border_style="blue"))


async def _ask_model(client: ModelClient, messages: list[dict[str, str]]) -> str:
    """Call the model; fall back to the stub reply on any client failure."""
    try:
        response = await client.generate(messages)
        return response.content
    except Exception as err:
        logger.warning("Model call failed, falling back to stub: %s", err)
        console.print(f"[yellow]Model call failed ({err}). Falling back to stub.[/yellow]")
        response = await StubModelClient().generate(messages)
        return response.content


def _run_turn(
    session: Session,
    client: ModelClient,
    user_message: str,
    budget_tokens: int,
    repo_path: str,
    auto_diff: bool,
) -> None:
    session.ingest({"type": "user_message", "payload": {"text": user_message}})

    if auto_diff:
        artifact_id = session.ingest_git_diff(repo_path)
        if artifact_id:
            console.print(f"[dim]Auto-ingested git diff: {artifact_id[:8]}...[/dim]")

    result = session.compile(user_message, budget_tokens)
    _print_debug(result, budget_tokens)

    assistant_text = asyncio.run(_ask_model(client, result.messages))
    console.print(Panel(Text(assistant_text), title="Assistant", border_style="green"))

    state = session.observe(assistant_text)
    if state.decisions:
        console.print(f"[green]Decisions tracked: {len(state.decisions)}[/green]")
    if state.constraints:
        console.print(f"[yellow]Constraints tracked: {len(state.constraints)}[/yellow]")
    if state.open_threads:
        console.print(f"[cyan]Open threads: {len(state.open_threads)}[/cyan]")


@click.group()
@click.option("--storage", envvar="MEMORY_RUNTIME_STORAGE_PATH", help="SQLite storage path")
@click.pass_context
def main(ctx: click.Context, storage: str | None) -> None:
    """Durable conversation memory with a deterministic context compiler."""
    ctx.ensure_object(dict)
    ctx.obj["storage"] = storage


@main.command()
@click.option("--session", "session_id", default="default-session", envvar="SESSION_ID")
@click.option("--budget", type=int, default=None, help="Token budget per turn")
@click.option("--repo", "repo_path", default=None, envvar="REPO_PATH", help="Repository path")
@click.option("--auto-diff", is_flag=True, envvar="AUTO_DIFF", help="Ingest git diff every turn")
@click.option("--llm", type=click.Choice(["stub", "openai"]), default=None, help="Model client")
@click.pass_context
def chat(
    ctx: click.Context,
    session_id: str,
    budget: int | None,
    repo_path: str | None,
    auto_diff: bool,
    llm: str | None,
) -> None:
    """Interactive chat loop that compiles context every turn."""
    config = _load_config(ctx.obj["storage"], budget, llm)
    repo_path = repo_path or os.getcwd()

    try:
        client = get_model_client(config.llm_client)
    except ValueError as err:
        console.print(f"[yellow]{err} Using stub responses.[/yellow]")
        client = StubModelClient()

    console.print(
        Panel.fit(
            f"[bold blue]Memory Runtime[/bold blue]\n\n"
            f"Session: {session_id}\n"
            f"Storage: {config.storage_path}\n"
            f"Token Budget: {config.budget_tokens}\n"
            f"Repo Path: {repo_path}\n\n"
            f"[dim]/diff[/dim] ingest git diff   [dim]/state[/dim] show state   "
            f"[dim]/exit[/dim] quit",
            border_style="blue",
        )
    )

    with create_runtime(config) as runtime:
        session = runtime.session(session_id)
        while True:
            try:
                user_message = console.input("\n[bold]You:[/bold] ").strip()
            except (EOFError, KeyboardInterrupt):
                break

            if not user_message:
                continue
            if user_message == "/exit":
                break
            if user_message == "/state":
                console.print_json(session.get_state().to_json())
                continue
            if user_message == "/diff":
                artifact_id = session.ingest_git_diff(repo_path)
                if artifact_id:
                    console.print(f"[green]Ingested git diff: {artifact_id}[/green]")
                else:
                    console.print("[dim]No git changes to ingest[/dim]")
                continue

            _run_turn(session, client, user_message, config.budget_tokens, repo_path, auto_diff)

    console.print("\n[bold]Goodbye![/bold]")


@main.command()
@click.argument("session_id")
@click.pass_context
def state(ctx: click.Context, session_id: str) -> None:
    """Print a session's state as JSON."""
    config = _load_config(ctx.obj["storage"], None, None)
    with create_runtime(config) as runtime:
        session_state = runtime.session(session_id).get_state()
    click.echo(json.dumps(session_state.to_dict(), indent=2, ensure_ascii=False))


@main.command(name="compile")
@click.argument("session_id")
@click.argument("message")
@click.option("--budget", type=int, default=None, help="Token budget")
@click.pass_context
def compile_command(ctx: click.Context, session_id: str, message: str, budget: int | None) -> None:
    """Compile context for MESSAGE and print the messages and debug trace."""
    config = _load_config(ctx.obj["storage"], budget, None)
    with create_runtime(config) as runtime:
        result = runtime.session(session_id).compile(message, config.budget_tokens)
    click.echo(json.dumps(result.model_dump(by_alias=True), indent=2))


if __name__ == "__main__":
    main()
