#!/usr/bin/env python3
"""
Resume Tailor command-line client.

Commands:
    login    - Log in and store the bearer token
    logout   - Forget the stored token
    status   - Show backend and session status
    profiles - List profiles and their save folders
    folder   - Set, clear or show the save folder of a profile
    submit   - Generate a tailored PDF for a job and save it
    history  - Show recent submissions

Examples:\n

    resume-tailor login --username jane

    resume-tailor folder set "Jane Doe" --path ~/Resumes/Applications

    resume-tailor submit --profile "Jane Doe" --company Acme --role "Data Engineer" --description-file jd.txt

    resume-tailor history -n 5
"""

import json
from pathlib import Path
from typing import Optional, Tuple

import typer
from loguru import logger
from typing_extensions import Annotated

from resume_tailor.config import ClientConfig, load_config
from resume_tailor.contexts.backend import BackendClient
from resume_tailor.contexts.output import (
    DirectoryHandle,
    FileHandle,
    FolderPreferenceStore,
    SaveDialogOptions,
    probe_capabilities,
    resolve_directory,
)
from resume_tailor.contexts.session import SessionContext
from resume_tailor.contexts.submission import JobSubmissionWorkflow
from resume_tailor.contexts.submission.logger import setup_submission_logger
from resume_tailor.exceptions import CancellationError, NetworkError, ResumeTailorError
from resume_tailor.utils.event_logging import get_recent_events, log_client_event
from resume_tailor.utils.local_storage import LocalStorage
from resume_tailor.utils.timestamp import format_timestamp

app = typer.Typer(
    add_completion=False,
    help="Generate tailored resumes from job descriptions",
    invoke_without_command=True,
)
folder_app = typer.Typer(add_completion=False, help="Manage per-profile save folders")
app.add_typer(folder_app, name="folder")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show progress logging on the console")
    ] = False,
):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()

    config = load_config()
    setup_submission_logger(
        config.logs_dir, config.backend_url, console_level="DEBUG" if verbose else None
    )
    session = SessionContext(LocalStorage(config.local_storage_path), token_key=config.token_key)
    session.init()
    ctx.obj = (config, session)


# --- Helpers ---


def _make_client(config: ClientConfig, session: SessionContext) -> BackendClient:
    return BackendClient(config, session)


def _runtime(ctx: typer.Context) -> Tuple[ClientConfig, SessionContext]:
    return ctx.obj


def _fail(message: str) -> None:
    typer.secho(f"✗ {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _require_login(session: SessionContext) -> None:
    if not session.is_authenticated:
        _fail("Not logged in. Run 'resume-tailor login' first.")


def _make_workflow(
    config: ClientConfig,
    client: BackendClient,
    interactive: Optional[bool] = None,
) -> JobSubmissionWorkflow:
    capabilities = probe_capabilities(probe_dir=config.state_dir, interactive=interactive)
    return JobSubmissionWorkflow(
        client=client,
        store=FolderPreferenceStore(
            config.database_path,
            table=config.settings_table,
            key_prefix=config.directory_key_prefix,
        ),
        capabilities=capabilities,
        downloads_dir=config.downloads_dir,
        save_dialog=PromptSaveDialog(config.downloads_dir),
        events_file=config.events_path,
    )


def _load_profiles(workflow: JobSubmissionWorkflow) -> None:
    """Load profiles or exit with the error (and a login hint on 401)."""
    workflow.load_profiles()
    if workflow.last_error is None:
        return
    if isinstance(workflow.last_error, NetworkError) and workflow.last_error.is_unauthorized:
        _fail(f"{workflow.feedback.error}\nSession expired. Run 'resume-tailor login' again.")
    _fail(workflow.feedback.error)


def _resolve_profile(workflow: JobSubmissionWorkflow, key: str) -> str:
    profile = workflow.find_profile(key)
    if profile is None:
        _fail(f"Unknown profile: {key}")
    return profile.id


def _record_event(config: ClientConfig, event_type: str, **extra) -> None:
    try:
        log_client_event(config.events_path, event_type=event_type, source="cli", **extra)
    except OSError as e:
        logger.warning(f"Could not record {event_type} event: {e}")


def _show_feedback(workflow: JobSubmissionWorkflow) -> None:
    if workflow.feedback.error:
        _fail(workflow.feedback.error)
    if workflow.feedback.response:
        typer.secho(f"✓ {workflow.feedback.response}", fg=typer.colors.GREEN)


class PromptSaveDialog:
    """
    Save dialog shown as a terminal prompt.

    An empty answer (or Ctrl+C) cancels. A directory answer saves the suggested
    name inside it. A missing .pdf extension is added.
    """

    def __init__(self, default_dir: Path):
        self.default_dir = default_dir

    def __call__(self, options: SaveDialogOptions) -> FileHandle:
        typer.echo(f"Suggested: {self.default_dir / options.suggested_name}")
        try:
            answer = typer.prompt(
                "Save PDF as (empty to download instead)", default="", show_default=False
            )
        except typer.Abort as e:
            raise CancellationError("Save dialog cancelled.") from e

        if not answer.strip():
            raise CancellationError("Save dialog cancelled.")

        path = Path(answer.strip()).expanduser()
        if path.is_dir():
            path = path / options.suggested_name
        extensions = [ext for file_type in options.types for ext in file_type.extensions]
        if extensions and path.suffix.lower() not in extensions:
            path = path.with_name(path.name + extensions[0])
        return FileHandle(path)


def _folder_picker(path: Optional[Path]):
    """Directory picker: the given path, or a terminal prompt when none was given."""

    def pick() -> DirectoryHandle:
        chosen = path
        if chosen is None:
            try:
                answer = typer.prompt("Folder for this profile", default="", show_default=False)
            except typer.Abort as e:
                raise CancellationError("Folder selection cancelled.") from e
            if not answer.strip():
                raise CancellationError("Folder selection cancelled.")
            chosen = Path(answer.strip())
        return resolve_directory(chosen)

    return pick


# --- Session commands ---


@app.command("login")
def login_command(
    ctx: typer.Context,
    username: Annotated[str, typer.Option("--username", "-u", prompt=True, help="Username")],
    password: Annotated[
        str, typer.Option("--password", "-p", prompt=True, hide_input=True, help="Password")
    ],
):
    """
    Log in to the backend and store the token.

    Examples:\n

        $ resume-tailor login --username jane     # Prompts for the password
    """
    config, session = _runtime(ctx)
    try:
        with _make_client(config, session) as client:
            client.login(username, password)
    except ResumeTailorError as e:
        _fail(e.message or "Unknown error")

    _record_event(config, "login", username=username)
    typer.secho(f"✓ Logged in as {username}", fg=typer.colors.GREEN)


@app.command("logout")
def logout_command(ctx: typer.Context):
    """Forget the stored token."""
    config, session = _runtime(ctx)
    was_authenticated = session.is_authenticated
    session.teardown()
    if was_authenticated:
        _record_event(config, "logout")
    typer.secho("✓ Logged out", fg=typer.colors.GREEN)


@app.command("status")
def status_command(ctx: typer.Context):
    """Show backend, session and storage locations."""
    config, session = _runtime(ctx)
    typer.secho("\nResume Tailor", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"  Backend:   {config.backend_url or config.origin + ' (same origin)'}")
    typer.echo(f"  Session:   {'logged in' if session.is_authenticated else 'not logged in'}")
    typer.echo(f"  State:     {config.state_dir}")
    typer.echo(f"  Downloads: {config.downloads_dir}")
    typer.echo(f"  Logs:      {config.logs_dir}")
    typer.echo("")


# --- Profile and folder commands ---


@app.command("profiles")
def profiles_command(ctx: typer.Context):
    """List profiles and their remembered save folders."""
    config, session = _runtime(ctx)
    _require_login(session)

    with _make_client(config, session) as client:
        workflow = _make_workflow(config, client, interactive=False)
        _load_profiles(workflow)

    if not workflow.profiles:
        typer.secho("No profiles found", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\n{len(workflow.profiles)} profile(s):", fg=typer.colors.BLUE)
    for profile in workflow.profiles:
        handle = workflow.dir_handles.get(profile.id)
        folder = f" -> {handle.path}" if handle else ""
        typer.echo(f"  {profile.id}: {profile.name}{folder}")
    typer.echo("")


@folder_app.command("set")
def folder_set_command(
    ctx: typer.Context,
    profile: Annotated[str, typer.Argument(help="Profile id or name")],
    path: Annotated[
        Optional[Path], typer.Option("--path", help="Folder to save into (prompted when omitted)")
    ] = None,
):
    """
    Remember a save folder for a profile. Generated PDFs for that profile are
    then saved there automatically.

    Examples:\n

        $ resume-tailor folder set "Jane Doe" --path ~/Resumes
    """
    config, session = _runtime(ctx)
    _require_login(session)

    with _make_client(config, session) as client:
        workflow = _make_workflow(config, client)
        if not workflow.capabilities.directory_access.available:
            _fail("Saving to folders is not supported here.")
        _load_profiles(workflow)
        profile_id = _resolve_profile(workflow, profile)
        workflow.choose_folder(profile_id, _folder_picker(path))

    _show_feedback(workflow)


@folder_app.command("clear")
def folder_clear_command(
    ctx: typer.Context,
    profile: Annotated[str, typer.Argument(help="Profile id or name")],
):
    """Forget the save folder of a profile."""
    config, session = _runtime(ctx)
    _require_login(session)

    with _make_client(config, session) as client:
        workflow = _make_workflow(config, client, interactive=False)
        _load_profiles(workflow)
        workflow.clear_folder(_resolve_profile(workflow, profile))

    _show_feedback(workflow)


@folder_app.command("show")
def folder_show_command(
    ctx: typer.Context,
    profile: Annotated[str, typer.Argument(help="Profile id or name")],
):
    """Show the save folder of a profile."""
    config, session = _runtime(ctx)
    _require_login(session)

    with _make_client(config, session) as client:
        workflow = _make_workflow(config, client, interactive=False)
        _load_profiles(workflow)
        profile_id = _resolve_profile(workflow, profile)

    handle = workflow.dir_handles.get(profile_id)
    if handle is None:
        typer.echo("No save folder set for this profile.")
    else:
        typer.echo(f"Auto-save will use this folder: {handle.path}")


# --- Submission ---


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    profile: Annotated[str, typer.Option("--profile", "-P", help="Profile id or name")],
    company: Annotated[str, typer.Option("--company", "-c", help="Company name")],
    role: Annotated[str, typer.Option("--role", "-r", help="Role / position")],
    description: Annotated[
        Optional[str], typer.Option("--description", "-d", help="Job description text")
    ] = None,
    description_file: Annotated[
        Optional[Path],
        typer.Option(
            "--description-file", "-f", exists=True, dir_okay=False, help="File holding the job description"
        ),
    ] = None,
    no_prompt: Annotated[
        bool, typer.Option("--no-prompt", help="Never show the save prompt; download instead")
    ] = False,
):
    """
    Generate a tailored PDF resume for a job and save it.

    The PDF goes to the profile's save folder when one is set, otherwise you
    are asked where to save it, otherwise it is downloaded.

    Examples:\n

        $ resume-tailor submit -P "Jane Doe" -c Acme -r "Data Engineer" -f jd.txt

        $ resume-tailor submit -P 42 -c Acme -r Engineer -d "We are hiring..." --no-prompt
    """
    config, session = _runtime(ctx)
    _require_login(session)

    if description_file is not None:
        description = description_file.read_text(encoding="utf-8")
    if not description or not description.strip():
        _fail("A job description is required (--description or --description-file).")
    if not company.strip() or not role.strip():
        _fail("Company and role are required.")

    with _make_client(config, session) as client:
        workflow = _make_workflow(config, client, interactive=False if no_prompt else None)
        _load_profiles(workflow)
        profile_match = workflow.find_profile(profile)
        workflow.select_profile(profile_match.id if profile_match else "")

        typer.secho("Generating PDF...", fg=typer.colors.BLUE)
        outcome = workflow.submit(company=company, role=role, job_description=description)

    if not outcome.success:
        _fail(outcome.message)
    typer.secho(f"✓ {outcome.message}", fg=typer.colors.GREEN)
    if outcome.path:
        typer.echo(f"  {outcome.path}")


@app.command("history")
def history_command(
    ctx: typer.Context,
    n: Annotated[int, typer.Option("--num", "-n", help="Number of recent submissions to show")] = 10,
    profile: Annotated[
        Optional[str], typer.Option("--profile", "-P", help="Only submissions for this profile name")
    ] = None,
    relative: Annotated[
        bool, typer.Option("--relative", help="Show relative timestamps (e.g., '2h ago')")
    ] = False,
    compact: Annotated[bool, typer.Option("--compact", help="Print raw JSON, one per line")] = False,
):
    """Show recent submissions."""
    config, _ = _runtime(ctx)
    events = get_recent_events(
        config.events_path, n=n, event_type="submission_completed", profile_name=profile
    )

    if not events:
        typer.secho("No submissions found", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=1)

    for event in events:
        if compact:
            typer.echo(json.dumps(event))
            continue
        color = typer.colors.RED if event.get("state") == "failed" else typer.colors.GREEN
        when = format_timestamp(event.get("timestamp", ""), relative=relative)
        typer.secho(f"{when}  {event.get('state', '?'): <10}", fg=color, nl=False)
        typer.echo(f" {event.get('profile_name') or '-'}  {event.get('message', '')}")


if __name__ == "__main__":
    app()
