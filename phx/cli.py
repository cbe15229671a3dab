"""phx command line interface."""

import asyncio
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.progress import BarColumn, DownloadColumn, Progress, TextColumn

from .activation import ActivationResolver, Activator
from .activation.resolver import LOCAL
from .config import PhxConfig
from .errors import InvalidVersion, NotInstalled, PhxError
from .runtime import Installer
from .utils import setup_logging
from .versions import ManifestFetcher, VersionStore

app = typer.Typer(
    name="phx",
    help="Install and switch between PHP versions.",
    add_completion=False,
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True, highlight=False)


@dataclass
class PhxState:
    config: PhxConfig
    store: VersionStore
    resolver: ActivationResolver
    activator: Activator

    def fetcher(self) -> ManifestFetcher:
        return ManifestFetcher(self.config.manifest_sources, timeout=self.config.http_timeout)


@contextmanager
def _handle_errors():
    try:
        yield
    except PhxError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.callback()
def callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show progress logging"),
):
    """Install and switch between PHP versions."""
    with _handle_errors():
        config = PhxConfig.from_env()
    setup_logging(config.log_dir, verbose)

    store = VersionStore(config.home, config.runtime_binary)
    store.ensure()
    ctx.obj = PhxState(
        config=config,
        store=store,
        resolver=ActivationResolver(store, config.pin_filename),
        activator=Activator(store, config.pin_filename),
    )


@app.command()
def install(ctx: typer.Context, version: str = typer.Argument(..., help="Version to install, e.g. 8.1.0")):
    """Install a specific PHP version."""
    state: PhxState = ctx.obj
    installer = Installer(state.store, state.fetcher(), timeout=state.config.http_timeout)

    with _handle_errors():
        if state.store.exists(version):
            console.print(f"PHP {version} is already installed at {state.store.version_path(version)}")
            return

        console.print(f"Installing PHP {version}")
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            console=err_console,
            transient=True,
        ) as progress:
            task = progress.add_task("Downloading", total=None)

            async def on_progress(name, downloaded, total):
                progress.update(task, completed=downloaded, total=total or None)

            path = asyncio.run(installer.install(version, on_progress))

    console.print(f"[green]PHP {version} installed successfully![/green] ({path})")


@app.command()
def use(ctx: typer.Context, version: str = typer.Argument(..., help="Installed version to make global")):
    """Switch to a specific PHP version."""
    state: PhxState = ctx.obj
    with _handle_errors():
        state.activator.activate_global(version)

    current_bin = state.config.current_link / "bin"
    console.print(f"Using PHP version {version}.")
    console.print("To activate this version in your current shell, run:")
    console.print(f'  export PATH="{current_bin}:$PATH"')


@app.command("list")
def list_installed(ctx: typer.Context):
    """List all installed PHP versions."""
    state: PhxState = ctx.obj
    versions = state.store.list()

    console.print("Installed PHP versions:")
    if not versions:
        console.print("  No PHP versions installed yet. Run 'phx install <version>'.")
        return

    current = state.store.current_global_target()
    pinned = state.resolver.read_pin(Path.cwd())
    for version in versions:
        local_mark = " (local)" if version == pinned else ""
        if version == current:
            console.print(f"  * {version} (currently in use){local_mark}")
        else:
            console.print(f"    {version}{local_mark}")


@app.command("list-remote")
def list_remote(ctx: typer.Context):
    """List PHP versions available for download."""
    state: PhxState = ctx.obj
    with _handle_errors():
        manifest = asyncio.run(state.fetcher().fetch())

    console.print("Available PHP versions (remote):")
    for version in manifest.version_ids():
        console.print(f"  {version}")


@app.command()
def local(ctx: typer.Context, version: str = typer.Argument(..., help="Installed version to pin here")):
    """Pin a PHP version for the current directory."""
    state: PhxState = ctx.obj
    with _handle_errors():
        pin_path = state.activator.activate_local(Path.cwd(), version)
    console.print(f"Local PHP version set to {version} in {pin_path}")


@app.command()
def current(ctx: typer.Context):
    """Show the active PHP version."""
    state: PhxState = ctx.obj
    with _handle_errors():
        resolution = state.resolver.resolve_source(Path.cwd())
        if resolution is None:
            if state.store.is_pointer_dangling():
                err_console.print("[yellow]Warning:[/yellow] the global 'current' link points at a removed version.")
            console.print("No PHP version currently active. Run 'phx use <version>'.")
            return

        if resolution.source == LOCAL:
            origin = f"set by {state.config.pin_filename}"
        else:
            origin = "global"
        console.print(f"Currently active PHP version: {escape(resolution.version) or '<empty>'} ({origin})")
        if not resolution.version:
            err_console.print(f"[yellow]Warning:[/yellow] {state.config.pin_filename} is empty.")
            return
        try:
            installed = state.store.exists(resolution.version)
        except InvalidVersion:
            installed = False
        if not installed:
            err_console.print(
                f"[yellow]Warning:[/yellow] PHP {escape(resolution.version)} is not installed. "
                f"Run 'phx install {escape(resolution.version)}'."
            )


@app.command()
def uninstall(ctx: typer.Context, version: str = typer.Argument(..., help="Installed version to remove")):
    """Remove an installed PHP version."""
    state: PhxState = ctx.obj
    with _handle_errors():
        if not state.store.exists(version):
            raise NotInstalled(version)
        state.resolver.ensure_removable(version, Path.cwd())
        console.print(f"Uninstalling PHP version {version}...")
        state.store.remove(version)
    console.print(f"PHP version {version} uninstalled successfully.")


@app.command()
def init(ctx: typer.Context):
    """Print shell lines that put the global PHP version on PATH."""
    state: PhxState = ctx.obj
    typer.echo(f'export PHX_DIR="{state.config.home}"')
    typer.echo('export PATH="$PHX_DIR/current/bin:$PATH"')


def main():
    app()


if __name__ == "__main__":
    main()
