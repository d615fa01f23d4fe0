"""WebDAV file manager CLI - Main commands."""
import asyncio
import logging
import shlex
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn
from rich.prompt import Confirm, Prompt
from rich.table import Table

from davpy.core.events import ERROR, RENDER, UPLOAD_DONE, UPLOAD_FAILED, UPLOAD_PROGRESS
from davpy.core.view import use_system_collation

app = typer.Typer(
    name="dav",
    help="WebDAV file manager CLI",
    add_completion=False
)
console = Console()

# Global options, filled in by the callback
state = {
    'url': 'http://localhost',
    'root': '/dav',
    'user': None,
    'password': None,
    'insecure': False,
}


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


class RichPrompter:
    """Prompter answering controller questions on the terminal."""

    async def confirm(self, message: str) -> bool:
        return await asyncio.to_thread(Confirm.ask, message)

    async def prompt(self, message: str, default: str = '') -> Optional[str]:
        return await asyncio.to_thread(Prompt.ask, message, default=default)


class PresetPrompter:
    """Prompter with answers fixed up front (one-shot commands)."""

    def __init__(self, answer: Optional[str] = None, confirmed: bool = True):
        self._answer = answer
        self._confirmed = confirmed

    async def confirm(self, message: str) -> bool:
        return self._confirmed

    async def prompt(self, message: str, default: str = '') -> Optional[str]:
        return self._answer


def make_client(prompter=None, launch: Optional[str] = None):
    from davpy import DavClient, DavConfig, AuthConfig, SSLConfig

    config = DavConfig(
        base_url=state['url'],
        root=state['root'],
        auth=AuthConfig(state['user'], state['password'] or '') if state['user'] else None,
        ssl=SSLConfig(verify=False, check_hostname=False) if state['insecure'] else SSLConfig(),
    )
    client = DavClient(config=config, prompter=prompter, launch=launch)
    client.on(ERROR, lambda error: console.print(f"[red]{error}[/red]"))
    return client


def split_remote(path: str):
    """Split a remote file path into (directory, name)."""
    from davpy.core.path import basename, parent
    return parent(path), basename(path)


def exit_on_error(result):
    if not result.ok:
        raise typer.Exit(1)
    return result


def render_view(view, long: bool = False) -> None:
    """Print breadcrumbs and rows of a directory view."""
    crumbs = " / ".join(crumb.label for crumb in view.breadcrumbs)
    console.print(f"[bold]{crumbs}[/bold]")

    if long:
        table = Table()
        table.add_column("Type", style="cyan")
        table.add_column("Name")
        table.add_column("Actions", style="dim")
        for row in view.rows:
            table.add_row(
                "D" if row.is_dir else "F",
                row.name,
                ", ".join(action.value for action in row.actions)
            )
        console.print(table)
        return

    for row in view.rows:
        if row.is_dir:
            console.print(f"[blue]{row.name}/[/blue]")
        else:
            console.print(row.name)


@app.callback()
def main_options(
    url: str = typer.Option("http://localhost", "--url", "-u", envvar="DAVPY_URL", help="Server URL"),
    root: str = typer.Option("/dav", "--root", envvar="DAVPY_ROOT", help="WebDAV mount root"),
    user: str = typer.Option(None, "--user", envvar="DAVPY_USER", help="Basic auth user"),
    password: str = typer.Option(None, "--password", envvar="DAVPY_PASSWORD", help="Basic auth password"),
    insecure: bool = typer.Option(False, "--insecure", "-k", help="Skip TLS verification"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    """Manage files on a WebDAV server."""
    use_system_collation()

    state.update(url=url, root=root, user=user, password=password, insecure=insecure)
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
        from davpy import setup_logging
        setup_logging(logging.DEBUG)


@app.command()
def ls(
    path: str = typer.Argument("/", help="Directory to list"),
    long: bool = typer.Option(False, "-l", "--long", help="Long format with actions"),
):
    """List files and folders."""
    async def list_files():
        async with make_client() as dav:
            result = exit_on_error(await dav.controller.navigate(path))
            render_view(result.view, long)

    run_async(list_files())


@app.command()
def get(
    remote_path: str = typer.Argument(..., help="Remote file path"),
    output: Path = typer.Option(Path("."), "--output", "-o", help="Output file or directory"),
):
    """Download a file."""
    async def do_download():
        async with make_client() as dav:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console
            ) as progress:
                progress.add_task(f"Downloading {remote_path}", total=None)
                try:
                    saved = await dav.api.fetch_or_download(remote_path, output)
                except Exception as e:
                    console.print(f"[red]Download failed: {e}[/red]")
                    raise typer.Exit(1)
            console.print(f"[green]Downloaded:[/green] {saved}")

    run_async(do_download())


@app.command()
def put(
    files: List[Path] = typer.Argument(..., help="Local files to upload", exists=True),
    dest: str = typer.Option("/", "--dest", "-d", help="Destination folder path"),
):
    """Upload files; each completed file refreshes the listing."""
    async def do_upload():
        async with make_client(launch=f"dir={dest}") as dav:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=console
            ) as progress:
                bar = progress.add_task("Uploading", total=100)

                def on_progress(p):
                    progress.update(bar, description=f"Uploading {p.name}", completed=p.percentage)

                dav.on(UPLOAD_PROGRESS, on_progress)
                dav.on(UPLOAD_FAILED, lambda task: console.print(
                    f"[red]Upload of {task.name} failed: {task.error}[/red]"
                ))
                dav.on(UPLOAD_DONE, lambda task: console.print(
                    f"[green]Uploaded:[/green] {task.remote_path}"
                ))
                batch = await dav.upload(*files)

            if dav.view:
                render_view(dav.view)
            if batch.failed:
                raise typer.Exit(1)

    run_async(do_upload())


@app.command()
def mkdir(
    path: str = typer.Argument(..., help="Folder path to create"),
):
    """Create a folder."""
    async def do_mkdir():
        directory, name = split_remote(path)
        async with make_client(PresetPrompter(answer=name), launch=f"dir={directory}") as dav:
            exit_on_error(await dav.controller.create_directory())
            console.print(f"[green]Created folder:[/green] {path}")

    run_async(do_mkdir())


@app.command()
def rm(
    path: str = typer.Argument(..., help="File or folder to delete"),
    force: bool = typer.Option(False, "-f", "--force", help="Force delete without confirmation"),
):
    """Delete a file or folder."""
    if not force:
        confirm = typer.confirm(f"Delete '{path}'?")
        if not confirm:
            raise typer.Abort()

    async def do_rm():
        directory, name = split_remote(path)
        async with make_client(PresetPrompter(), launch=f"dir={directory}") as dav:
            exit_on_error(await dav.controller.refresh())
            exit_on_error(await dav.controller.delete(name))
            console.print(f"[green]Deleted:[/green] {path}")

    run_async(do_rm())


@app.command()
def mv(
    source: str = typer.Argument(..., help="Source file"),
    dest: str = typer.Argument(..., help="Destination folder"),
):
    """Move a file into another folder."""
    async def do_mv():
        directory, name = split_remote(source)
        async with make_client(PresetPrompter(answer=dest), launch=f"dir={directory}") as dav:
            exit_on_error(await dav.controller.refresh())
            result = exit_on_error(await dav.controller.move(name))
            if result.skipped:
                console.print("[yellow]Nothing to move[/yellow]")
            else:
                console.print(f"[green]Moved:[/green] {source} -> {dest}")

    run_async(do_mv())


@app.command()
def rename(
    path: str = typer.Argument(..., help="File to rename"),
    new_name: str = typer.Argument(..., help="New file name"),
):
    """Rename a file."""
    async def do_rename():
        directory, name = split_remote(path)
        async with make_client(PresetPrompter(answer=new_name), launch=f"dir={directory}") as dav:
            exit_on_error(await dav.controller.refresh())
            result = exit_on_error(await dav.controller.rename(name))
            if result.skipped:
                console.print("[yellow]Name unchanged[/yellow]")
            else:
                console.print(f"[green]Renamed:[/green] {name} -> {new_name}")

    run_async(do_rename())


@app.command("edit-url")
def edit_url(
    path: str = typer.Argument(..., help="Remote text file"),
):
    """Print the companion editor URL for a file."""
    from davpy.core.view import is_editable

    directory, name = split_remote(path)
    if not is_editable(name):
        console.print(f"[red]Not an editable file: {name}[/red]")
        raise typer.Exit(1)
    dav = make_client(launch=f"dir={directory}")
    console.print(dav.config.resolve(dav.controller.edit_url(name)))


@app.command()
def menu():
    """Show the server's navigation menu."""
    async def show_menu():
        async with make_client() as dav:
            try:
                links = await dav.menu()
            except Exception as e:
                console.print(f"[red]Menu unavailable: {e}[/red]")
                raise typer.Exit(1)
            table = Table()
            table.add_column("Title")
            table.add_column("URL", style="dim")
            for link in links:
                table.add_row(link.title, link.url)
            console.print(table)

    run_async(show_menu())


SHELL_HELP = """Commands:
  ls                 refresh the listing
  cd NAME|PATH|..    change directory
  get NAME [DEST]    download a file
  put FILE...        upload files
  rm NAME            delete an entry
  rename NAME        rename a file
  mv NAME            move a file
  mkdir              create a folder
  edit NAME          show the editor URL
  q                  quit"""


@app.command()
def browse(
    directory: str = typer.Option(None, "--dir", help="Initial directory"),
):
    """Interactive file manager shell."""
    from davpy import Action
    from davpy.core.path import parent

    actions = {
        'get': Action.DOWNLOAD,
        'rm': Action.DELETE,
        'rename': Action.RENAME,
        'mv': Action.MOVE,
        'edit': Action.EDIT,
    }

    async def shell():
        launch = f"dir={directory}" if directory else None
        async with make_client(RichPrompter(), launch=launch) as dav:
            dav.on(RENDER, render_view)
            await dav.start()

            while True:
                line = await asyncio.to_thread(Prompt.ask, f"[bold]{dav.current_directory}[/bold]")
                try:
                    words = shlex.split(line)
                except ValueError as e:
                    console.print(f"[red]{e}[/red]")
                    continue
                if not words:
                    continue
                command, args = words[0], words[1:]
                controller = dav.controller

                if command in ('q', 'quit', 'exit'):
                    break
                elif command == 'ls':
                    await controller.refresh()
                elif command == 'cd' and args:
                    target = args[0]
                    if target == '..':
                        await controller.navigate(parent(controller.current_directory))
                    elif target.startswith('/'):
                        await controller.navigate(target)
                    else:
                        try:
                            await controller.dispatch(target, Action.NAVIGATE)
                        except KeyError:
                            console.print(f"[red]No such directory: {target}[/red]")
                elif command == 'put' and args:
                    await controller.upload(args)
                elif command == 'mkdir':
                    await controller.create_directory()
                elif command in actions and args:
                    try:
                        result = await controller.dispatch(args[0], actions[command], *args[1:])
                    except KeyError:
                        console.print(f"[red]Cannot {command} {args[0]}[/red]")
                        continue
                    if command == 'edit':
                        console.print(dav.config.resolve(result.value))
                    elif command == 'get' and result.ok:
                        console.print(f"[green]Downloaded:[/green] {result.value}")
                else:
                    console.print(SHELL_HELP)

    run_async(shell())


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
