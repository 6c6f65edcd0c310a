"""
Change Desk CLI Entry Point

Command-line interface using Click.
"""

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

import click
from dotenv import load_dotenv

# Load .env file from the current directory
_env_path = Path.cwd() / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

from change_desk import __version__
from change_desk.backends import ChangeRequestBackend
from change_desk.components import (
    ApprovalList,
    RequestDetail,
    SubmissionForm,
)
from change_desk.errors import ConfigError, extract_error_message
from change_desk.notifications import Notification, Notifier, Severity
from change_desk_cli.config import BACKENDS, Config, get_config, init_project

logger = logging.getLogger(__name__)


def configure_logging(config: Config, interactive: bool) -> None:
    """Set up logging; the TUI logs to a file so it never draws over the screen."""
    if not config.log_level:
        return
    level = getattr(logging, config.log_level.upper(), logging.INFO)
    if interactive:
        config.ensure_dirs()
        logging.basicConfig(
            level=level,
            filename=str(config.log_file),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    else:
        logging.basicConfig(
            level=level,
            stream=sys.stderr,
            format="%(levelname)s %(name)s: %(message)s",
        )


def echo_notification(notification: Notification) -> None:
    """Print a component notification."""
    err = notification.severity in (Severity.WARNING, Severity.ERROR)
    click.echo(f"{notification.title}: {notification.message}", err=err)


def run_with_backend(
    config: Config,
    fn: Callable[[ChangeRequestBackend], Awaitable[Any]],
) -> Any:
    """Run an async operation against the configured backend."""

    try:
        backend = config.create_backend()
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    async def runner():
        try:
            return await fn(backend)
        finally:
            close = getattr(backend, "aclose", None)
            if close is not None:
                await close()

    return asyncio.run(runner())


def launch_tui(config: Config, initial_tab: str) -> None:
    """Start the Textual application on a tab."""
    from change_desk_cli.app import run_app

    try:
        run_app(config=config, initial_tab=initial_tab)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.option(
    "--backend", "-b",
    type=click.Choice(BACKENDS),
    help="Controller backend",
)
@click.option(
    "--service-url", "-s",
    help="Change desk service URL (http backend)",
)
@click.option(
    "--user", "-u",
    help="Your user id (resolves to your student record)",
)
@click.option(
    "--seed",
    type=click.Path(exists=True, path_type=Path),
    help="JSON seed file (memory backend)",
)
@click.option(
    "--project", "-P",
    type=click.Path(exists=True, path_type=Path),
    help="Project directory",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    help="Enable logging at this level",
)
@click.pass_context
def cli(
    ctx: click.Context,
    backend: Optional[str],
    service_url: Optional[str],
    user: Optional[str],
    seed: Optional[Path],
    project: Optional[Path],
    log_level: Optional[str],
) -> None:
    """
    Change Desk - change request approval workflow

    Start the interactive review desk.
    """
    ctx.ensure_object(dict)

    try:
        config = get_config(project_dir=project)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Apply command-line options
    if backend:
        config.service.backend = backend
    if service_url:
        config.service.service_url = service_url
    if user:
        config.user_id = user
    if seed:
        config.seed_file = seed
        if not backend:
            config.service.backend = "memory"
    if log_level:
        config.log_level = log_level

    ctx.obj["config"] = config

    # If no subcommand, run the TUI
    if ctx.invoked_subcommand is None:
        configure_logging(config, interactive=True)
        launch_tui(config, "review-tab")
    else:
        configure_logging(config, interactive=ctx.invoked_subcommand in ("review", "form"))


@cli.command()
@click.pass_context
def review(ctx: click.Context) -> None:
    """
    Open the review desk (pending list and detail panel).
    """
    launch_tui(ctx.obj["config"], "review-tab")


@cli.command()
@click.pass_context
def form(ctx: click.Context) -> None:
    """
    Open the change request form.
    """
    launch_tui(ctx.obj["config"], "submit-tab")


@cli.command()
@click.option(
    "--type", "-t", "request_type",
    type=click.Choice(["Email", "Phone", "MailingAddress"]),
    help="Field to change",
)
@click.option(
    "--value", "-v", "new_value",
    help="New value (JSON object for MailingAddress)",
)
@click.pass_context
def submit(ctx: click.Context, request_type: Optional[str], new_value: Optional[str]) -> None:
    """
    Submit a change request (non-interactive).

    Example: changedesk --user u1 submit --type Email --value me@example.com
    """
    config = ctx.obj["config"]

    async def run(backend):
        form = SubmissionForm(
            backend,
            user_id=config.user_id,
            notifier=Notifier(sink=echo_notification),
        )
        await form.load()
        form.set_request_type(request_type)
        form.set_new_value(new_value)
        return await form.submit()

    request_id = run_with_backend(config, run)
    if request_id is None:
        sys.exit(1)
    click.echo(request_id)


@cli.command()
@click.pass_context
def pending(ctx: click.Context) -> None:
    """
    List pending change requests.
    """
    config = ctx.obj["config"]
    notifier = Notifier(sink=echo_notification)

    async def run(backend):
        approval_list = ApprovalList(backend, notifier=notifier)
        await approval_list.load()
        return approval_list

    approval_list = run_with_backend(config, run)
    if any(n.severity == Severity.ERROR for n in notifier.history):
        sys.exit(1)

    click.echo("Pending Change Requests")
    click.echo("=" * 40)
    if approval_list.is_empty:
        click.echo("  No pending requests")
        return
    for row in approval_list.requests:
        click.echo(
            f"  {row.id}  {row.student_name:<24} {row.request_type:<15} "
            f"{row.new_value_preview or ''}"
        )


@cli.command()
@click.argument("request_id")
@click.pass_context
def show(ctx: click.Context, request_id: str) -> None:
    """
    Show one change request.
    """
    config = ctx.obj["config"]

    async def run(backend):
        detail = RequestDetail(backend, notifier=Notifier(sink=echo_notification))
        await detail.set_record_id(request_id)
        return detail

    detail = run_with_backend(config, run)
    if detail.request is None:
        sys.exit(1)

    request = detail.request
    click.echo(f"Request:        {request.id}")
    click.echo(f"Student:        {request.student_name or '-'}")
    click.echo(f"Type:           {request.request_type}")
    click.echo(f"Current value:  {detail.rendered_old_value or '-'}")
    click.echo(f"New value:      {detail.rendered_new_value or '-'}")
    click.echo(f"Status:         {request.status}")


def _resolve(ctx: click.Context, request_id: str, reason: Optional[str], approve: bool) -> None:
    config = ctx.obj["config"]

    async def run(backend):
        detail = RequestDetail(backend, notifier=Notifier(sink=echo_notification))
        await detail.set_record_id(request_id)
        if detail.request is None:
            return False
        if approve:
            return await detail.approve()
        detail.set_reason(reason)
        return await detail.reject()

    if not run_with_backend(config, run):
        sys.exit(1)


@cli.command()
@click.argument("request_id")
@click.pass_context
def approve(ctx: click.Context, request_id: str) -> None:
    """
    Approve a pending change request.
    """
    _resolve(ctx, request_id, reason=None, approve=True)


@cli.command()
@click.argument("request_id")
@click.option("--reason", "-r", default="", help="Rejection reason")
@click.pass_context
def reject(ctx: click.Context, request_id: str, reason: str) -> None:
    """
    Reject a pending change request.
    """
    _resolve(ctx, request_id, reason=reason, approve=False)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8040, type=int, help="Port")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """
    Run the reference change desk service (in-memory store).
    """
    import uvicorn

    from change_desk.backends import InMemoryChangeRequestBackend
    from change_desk.server import create_app

    config = ctx.obj["config"]
    backend = InMemoryChangeRequestBackend()
    if config.seed_file:
        try:
            count = backend.load_seed(config.seed_file)
        except (OSError, ValueError) as e:
            click.echo(f"Error: cannot load seed file: {extract_error_message(e)}", err=True)
            sys.exit(1)
        click.echo(f"Loaded {count} requests from {config.seed_file}")

    uvicorn.run(create_app(backend), host=host, port=port)


@cli.command()
@click.option(
    "--path", "-p",
    type=click.Path(path_type=Path),
    default=None,
    help="Directory to initialize",
)
def init(path: Optional[Path]) -> None:
    """
    Initialize a Change Desk project.

    Creates .changedesk directory with default configuration.
    """
    try:
        project_dir = init_project(path)
        click.echo(f"Initialized Change Desk project at: {project_dir}")
        click.echo("\nCreated:")
        click.echo("  - .changedesk/config.json")
    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def config(ctx: click.Context) -> None:
    """
    Show current configuration.
    """
    cfg = ctx.obj.get("config")
    if cfg is None:
        cfg = get_config()

    click.echo("Change Desk Configuration")
    click.echo("=" * 40)
    click.echo(f"Global dir:     {cfg.global_dir}")
    click.echo(f"Project dir:    {cfg.project_dir or 'None'}")
    click.echo(f"Backend:        {cfg.service.backend}")
    click.echo(f"Service URL:    {cfg.service.service_url}")
    click.echo(f"User:           {cfg.user_id or 'None'}")
    click.echo(f"Seed file:      {cfg.seed_file or 'None'}")
    click.echo(f"Guard actions:  {cfg.guard_in_flight}")


@cli.command()
def version() -> None:
    """
    Show version information.
    """
    click.echo(f"Change Desk v{__version__}")


def main() -> None:
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
