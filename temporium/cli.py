"""CLI entry point for Temporium."""

import json
from dataclasses import asdict, replace
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from temporium.core.binary import VerificationResult, describe
from temporium.core.models import GENRES, Failure, Game, GameFilter, User
from temporium.core.storage import get_default_db_path
from temporium.core.store import Store
from temporium.log import configure_logging

app = typer.Typer(
    name="temporium",
    help="Personal game catalog with checksummed binary export.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

UserOption = Annotated[
    str, typer.Option("--user", "-u", envvar="TEMPORIUM_USER", help="Catalog owner")
]
PasswordOption = Annotated[
    str,
    typer.Option(
        "--password", "-p", envvar="TEMPORIUM_PASSWORD", prompt=True, hide_input=True
    ),
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]

# Filter options, shared by `list` and `export`
CompletedOpt = Annotated[bool | None, typer.Option("--completed/--not-completed")]
GenreOpt = Annotated[str | None, typer.Option("--genre", "-g")]
DiskMinOpt = Annotated[float | None, typer.Option("--disk-min")]
DiskMaxOpt = Annotated[float | None, typer.Option("--disk-max")]
RamMinOpt = Annotated[float | None, typer.Option("--ram-min")]
RamMaxOpt = Annotated[float | None, typer.Option("--ram-max")]
VramMinOpt = Annotated[float | None, typer.Option("--vram-min")]
VramMaxOpt = Annotated[float | None, typer.Option("--vram-max")]
TagOpt = Annotated[str | None, typer.Option("--tag", "-t", help="Substring of the tag list")]
FavoriteOpt = Annotated[bool | None, typer.Option("--favorite/--not-favorite")]
InstalledOpt = Annotated[bool | None, typer.Option("--installed/--not-installed")]
RatingMinOpt = Annotated[int | None, typer.Option("--rating-min")]
RatingMaxOpt = Annotated[int | None, typer.Option("--rating-max")]
RatedOpt = Annotated[bool | None, typer.Option("--rated/--unrated")]


def fail(failure: Failure | str) -> NoReturn:
    """Print an error and exit with status 1."""
    if isinstance(failure, Failure):
        err_console.print(f"[red]Error ({failure.kind.value}):[/red] {failure.message}")
    else:
        err_console.print(f"[red]Error:[/red] {failure}")
    raise typer.Exit(code=1)


def open_store(ctx: typer.Context) -> Store:
    """Open the store selected by the global options and bootstrap the admin."""
    store = Store(ctx.obj["db"])
    result = store.ensure_admin_exists()
    if result.error:
        store.close()
        fail(result.error)
    return store


def login(store: Store, username: str, password: str) -> User:
    result = store.authenticate(username, password)
    if result.error:
        fail(result.error)
    return result.unwrap()


def game_to_dict(game: Game) -> dict[str, object]:
    return asdict(game)


def print_games(games: list[Game]) -> None:
    if not games:
        console.print("[dim]No games found[/]")
        return
    table = Table()
    table.add_column("ID", justify="right")
    table.add_column("Name", style="cyan")
    table.add_column("Genre")
    table.add_column("Disk", justify="right")
    table.add_column("RAM", justify="right")
    table.add_column("VRAM", justify="right")
    table.add_column("Rating", justify="right")
    table.add_column("Flags")
    table.add_column("Tags", style="dim")
    for game in games:
        flags = "".join(
            mark
            for mark, enabled in (
                ("✓", game.completed),
                ("★", game.is_favorite),
                ("⬇", game.is_installed),
            )
            if enabled
        )
        table.add_row(
            str(game.id),
            game.name,
            game.genre,
            f"{game.disk_space:g}",
            f"{game.ram_usage:g}",
            f"{game.vram_required:g}",
            str(game.rating) if game.has_rating else "-",
            flags,
            game.tags,
        )
    console.print(table)


def warn_bounds(game: Game) -> None:
    for message in game.bound_violations():
        console.print(f"[yellow]Warning:[/] {message}")


@app.callback()
def main(
    ctx: typer.Context,
    db: Annotated[
        Path | None, typer.Option("--db", envvar="TEMPORIUM_DB", help="Database file")
    ] = None,
    log_level: Annotated[
        str, typer.Option("--log-level", envvar="TEMPORIUM_LOG_LEVEL")
    ] = "WARNING",
    log_json: Annotated[bool, typer.Option("--log-json", help="Log as JSON lines")] = False,
) -> None:
    """Global options."""
    configure_logging(log_level, json_output=log_json)
    ctx.obj = {"db": db or get_default_db_path()}


@app.command()
def init(ctx: typer.Context) -> None:
    """Create the database and the default admin account."""
    store = Store(ctx.obj["db"])
    with store:
        result = store.ensure_admin_exists()
        if result.error:
            fail(result.error)
        if result.value:
            console.print("[green]Created default admin[/] (admin / admin123)")
        console.print(f"Database: {store.db_path}")


@app.command()
def register(
    ctx: typer.Context,
    username: Annotated[str, typer.Argument(help="New username")],
    password: Annotated[
        str, typer.Option(prompt=True, hide_input=True, confirmation_prompt=True)
    ],
) -> None:
    """Create a new catalog owner."""
    with open_store(ctx) as store:
        result = store.register(username, password)
        if result.error:
            fail(result.error)
        console.print(f"[green]Registered[/] {username}")


@app.command()
def add(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    name: Annotated[str, typer.Argument(help="Game name")],
    disk: Annotated[float, typer.Option("--disk", help="Disk space, GB")],
    ram: Annotated[float, typer.Option("--ram", help="RAM usage, GB")],
    vram: Annotated[float, typer.Option("--vram", help="Required VRAM, GB")],
    genre: Annotated[str, typer.Option("--genre", "-g", help=", ".join(GENRES))] = "Other",
    completed: Annotated[bool, typer.Option("--completed")] = False,
    url: Annotated[str, typer.Option("--url")] = "",
    rating: Annotated[int, typer.Option("--rating", help="0-10, or -1 for none")] = -1,
    favorite: Annotated[bool, typer.Option("--favorite")] = False,
    installed: Annotated[bool, typer.Option("--installed")] = False,
    notes: Annotated[str, typer.Option("--notes")] = "",
    tags: Annotated[str, typer.Option("--tags", help="Comma-separated")] = "",
) -> None:
    """Add a game to your catalog."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        game = Game(
            id=0,
            name=name,
            disk_space=disk,
            ram_usage=ram,
            vram_required=vram,
            genre=genre,
            completed=completed,
            url=url,
            user_id=owner.id,
            rating=rating,
            is_favorite=favorite,
            is_installed=installed,
            notes=notes,
            tags=tags,
        )
        warn_bounds(game)
        result = store.add_game(game)
        if result.error:
            fail(result.error)
        console.print(f"[green]Added[/] {name} (id {result.unwrap().id})")


@app.command()
def edit(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    game_id: Annotated[int, typer.Argument(help="Game ID")],
    name: Annotated[str | None, typer.Option("--name")] = None,
    disk: Annotated[float | None, typer.Option("--disk")] = None,
    ram: Annotated[float | None, typer.Option("--ram")] = None,
    vram: Annotated[float | None, typer.Option("--vram")] = None,
    genre: Annotated[str | None, typer.Option("--genre", "-g")] = None,
    completed: CompletedOpt = None,
    url: Annotated[str | None, typer.Option("--url")] = None,
    rating: Annotated[int | None, typer.Option("--rating")] = None,
    favorite: FavoriteOpt = None,
    installed: InstalledOpt = None,
    notes: Annotated[str | None, typer.Option("--notes")] = None,
    tags: Annotated[str | None, typer.Option("--tags")] = None,
) -> None:
    """Change fields of one of your games."""
    changes = {
        "name": name,
        "disk_space": disk,
        "ram_usage": ram,
        "vram_required": vram,
        "genre": genre,
        "completed": completed,
        "url": url,
        "rating": rating,
        "is_favorite": favorite,
        "is_installed": installed,
        "notes": notes,
        "tags": tags,
    }
    changes = {field: value for field, value in changes.items() if value is not None}
    if not changes:
        fail("Nothing to change")

    with open_store(ctx) as store:
        owner = login(store, user, password)
        current = store.get_game(game_id, owner.id)
        if current.error:
            fail(current.error)
        game = replace(current.unwrap(), **changes)
        warn_bounds(game)
        result = store.update_game(game)
        if result.error:
            fail(result.error)
        console.print(f"[green]Updated[/] {game.name}")


@app.command()
def remove(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    game_id: Annotated[int | None, typer.Argument(help="Game ID")] = None,
    name: Annotated[str | None, typer.Option("--name", "-n", help="Remove by name")] = None,
) -> None:
    """Remove one of your games by ID or name."""
    if (game_id is None) == (name is None):
        fail("Give either a game ID or --name")
    with open_store(ctx) as store:
        owner = login(store, user, password)
        if name is not None:
            result = store.delete_game_by_name(name, owner.id)
        else:
            result = store.delete_game(game_id, owner.id)  # type: ignore[arg-type]
        if result.error:
            fail(result.error)
        console.print("[green]Removed[/]")


@app.command("list")
def list_games(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    completed: CompletedOpt = None,
    genre: GenreOpt = None,
    disk_min: DiskMinOpt = None,
    disk_max: DiskMaxOpt = None,
    ram_min: RamMinOpt = None,
    ram_max: RamMaxOpt = None,
    vram_min: VramMinOpt = None,
    vram_max: VramMaxOpt = None,
    tag: TagOpt = None,
    favorite: FavoriteOpt = None,
    installed: InstalledOpt = None,
    rating_min: RatingMinOpt = None,
    rating_max: RatingMaxOpt = None,
    rated: RatedOpt = None,
    output_json: JsonOption = False,
) -> None:
    """List your games, optionally filtered."""
    game_filter = GameFilter(
        completed=completed,
        genre=genre,
        disk_space_min=disk_min,
        disk_space_max=disk_max,
        ram_min=ram_min,
        ram_max=ram_max,
        vram_min=vram_min,
        vram_max=vram_max,
        tag=tag,
        favorite=favorite,
        installed=installed,
        rating_min=rating_min,
        rating_max=rating_max,
        has_rating=rated,
    )
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.query(owner.id, game_filter)
        if result.error:
            fail(result.error)
        games = result.unwrap()
        if output_json:
            print(json.dumps([game_to_dict(g) for g in games]))
        else:
            print_games(games)


@app.command()
def show(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    game_id: Annotated[int, typer.Argument(help="Game ID")],
    output_json: JsonOption = False,
) -> None:
    """Show every field of one game."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.get_game(game_id, owner.id)
        if result.error:
            fail(result.error)
        game = result.unwrap()
        if output_json:
            print(json.dumps(game_to_dict(game)))
            return
        for field, value in game_to_dict(game).items():
            console.print(f"[bold]{field}:[/] {value}")


@app.command()
def notes(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    game_id: Annotated[int, typer.Argument(help="Game ID")],
    text: Annotated[str, typer.Argument(help="New notes")],
) -> None:
    """Replace the notes of a game."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.update_notes(game_id, owner.id, text)
        if result.error:
            fail(result.error)
        console.print("[green]Notes saved[/]")


@app.command()
def tags(ctx: typer.Context, user: UserOption, password: PasswordOption) -> None:
    """List the tags used across your catalog."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.user_tags(owner.id)
        if result.error:
            fail(result.error)
        for tag in result.unwrap():
            console.print(tag)


@app.command()
def stats(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    output_json: JsonOption = False,
) -> None:
    """Show catalog statistics."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.stats(owner.id)
        if result.error:
            fail(result.error)
        summary = result.unwrap()
        if output_json:
            print(json.dumps(asdict(summary)))
            return
        console.print(f"Games: {summary.total_games}")
        console.print(f"Favorites: {summary.favorites_count}")
        console.print(f"Completed: {summary.completed_count}")
        console.print(f"Unrated: {summary.no_rating_count}")
        console.print(
            f"Installed: {summary.installed_count} ({summary.installed_disk_space:.1f} GB)"
        )
        console.print(f"Without URL: {summary.no_url_count}")


@app.command()
def export(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    file: Annotated[Path, typer.Argument(help="Output file")],
    completed: CompletedOpt = None,
    genre: GenreOpt = None,
    disk_min: DiskMinOpt = None,
    disk_max: DiskMaxOpt = None,
    ram_min: RamMinOpt = None,
    ram_max: RamMaxOpt = None,
    vram_min: VramMinOpt = None,
    vram_max: VramMaxOpt = None,
    tag: TagOpt = None,
    favorite: FavoriteOpt = None,
    installed: InstalledOpt = None,
    rating_min: RatingMinOpt = None,
    rating_max: RatingMaxOpt = None,
    rated: RatedOpt = None,
) -> None:
    """Export your games (optionally filtered) to a binary file."""
    game_filter = GameFilter(
        completed=completed,
        genre=genre,
        disk_space_min=disk_min,
        disk_space_max=disk_max,
        ram_min=ram_min,
        ram_max=ram_max,
        vram_min=vram_min,
        vram_max=vram_max,
        tag=tag,
        favorite=favorite,
        installed=installed,
        rating_min=rating_min,
        rating_max=rating_max,
        has_rating=rated,
    )
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.export_file(
            file, owner.id, None if game_filter.is_empty() else game_filter
        )
        if result.error:
            fail(result.error)
        summary = result.unwrap()
        console.print(f"[green]Exported[/] {summary.record_count} games to {file}")
        console.print(f"  [dim]SHA-256: {summary.digest}[/]")


@app.command()
def verify(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Export file")],
) -> None:
    """Check an export file's header and checksum."""
    with Store(ctx.obj["db"]) as store:
        outcome = store.verify_file(file)
        if outcome is VerificationResult.OK:
            console.print(f"[green]{describe(outcome)}[/]")
        else:
            fail(describe(outcome))


@app.command()
def inspect(
    ctx: typer.Context,
    file: Annotated[Path, typer.Argument(help="Export file")],
    output_json: JsonOption = False,
) -> None:
    """List the games inside a verified export file."""
    with Store(ctx.obj["db"]) as store:
        result = store.read_file(file)
        if result.error:
            fail(result.error)
        games = result.unwrap()
        if output_json:
            print(json.dumps([game_to_dict(g) for g in games]))
        else:
            print_games(games)


@app.command("import")
def import_games(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    file: Annotated[Path, typer.Argument(help="Export file")],
) -> None:
    """Import games from a verified export file into your catalog."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.import_file(file, owner.id)
        if result.error:
            fail(result.error)
        report = result.unwrap()
        console.print(f"[green]Imported[/] {len(report.imported)} of {report.total} games")
        for failure in report.failures:
            console.print(f"  [yellow]Skipped[/] {failure.name}: {failure.message}")


@app.command()
def users(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    output_json: JsonOption = False,
) -> None:
    """List all accounts (admin only)."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        if not owner.is_admin:
            fail("Admin rights required")
        result = store.list_owners()
        if result.error:
            fail(result.error)
        rows = []
        for account in result.unwrap():
            count = store.count_games(account.id)
            rows.append(
                {
                    "id": account.id,
                    "username": account.username,
                    "is_admin": account.is_admin,
                    "games": count.value if count.ok else None,
                }
            )
        if output_json:
            print(json.dumps(rows))
            return
        for row in rows:
            role = " [magenta](admin)[/]" if row["is_admin"] else ""
            console.print(f"{row['id']:>4}  [cyan]{row['username']}[/]{role}  {row['games']} games")


@app.command("delete-user")
def delete_user(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    user_id: Annotated[int, typer.Argument(help="ID of the account to delete")],
) -> None:
    """Delete an account and its games (admin only)."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        if not owner.is_admin:
            fail("Admin rights required")
        result = store.delete_owner(user_id)
        if result.error:
            fail(result.error)
        console.print("[green]Account deleted[/]")


@app.command()
def rename(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    new_username: Annotated[str, typer.Argument(help="New username")],
) -> None:
    """Change your username (your password is re-hashed with it)."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.rename_owner(owner.id, new_username, password)
        if result.error:
            fail(result.error)
        console.print(f"[green]Renamed[/] {owner.username} -> {new_username}")


@app.command()
def passwd(
    ctx: typer.Context,
    user: UserOption,
    password: PasswordOption,
    new_password: Annotated[
        str, typer.Option(prompt=True, hide_input=True, confirmation_prompt=True)
    ],
) -> None:
    """Change your password."""
    with open_store(ctx) as store:
        owner = login(store, user, password)
        result = store.change_password(owner.id, new_password)
        if result.error:
            fail(result.error)
        console.print("[green]Password changed[/]")


@app.command("reset-admin")
def reset_admin(
    ctx: typer.Context,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """Reset the admin account to admin / admin123."""
    if not yes:
        typer.confirm("Reset the admin account to its default credentials?", abort=True)
    with open_store(ctx) as store:
        result = store.reset_admin_credentials()
        if result.error:
            fail(result.error)
        console.print("[green]Admin reset[/] (admin / admin123)")


if __name__ == "__main__":
    app()
