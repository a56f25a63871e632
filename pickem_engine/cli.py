"""CLI entrypoint using Typer.

This module defines the operator command-line interface for the scoring
engine. Commands are organized into subcommand groups for the database,
pick scoring, weekly awards and season standings.

Example:
    $ pickem-engine --help
    $ pickem-engine db init
    $ pickem-engine scoring recompute g-101 g-102
    $ pickem-engine awards process --week 5 --season 2025 --dry-run
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from pickem_engine import __version__
from pickem_engine.config import get_settings
from pickem_engine.logging import configure_from_settings
from pickem_engine.types import (
    AwardCandidate,
    GameId,
    GameStatus,
    PickemEngineError,
    SeasonType,
    WeekKey,
)

# Initialize console for rich output
console = Console()

# Create main app
app = typer.Typer(
    name="pickem-engine",
    help="Pick'em Scoring & Awards Engine CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Create subcommand groups
db_app = typer.Typer(
    name="db",
    help="Database management commands",
    no_args_is_help=True,
)
scoring_app = typer.Typer(
    name="scoring",
    help="Pick scoring commands",
    no_args_is_help=True,
)
awards_app = typer.Typer(
    name="awards",
    help="Weekly awards commands",
    no_args_is_help=True,
)
standings_app = typer.Typer(
    name="standings",
    help="Season standings commands",
    no_args_is_help=True,
)

# Register subcommand groups
app.add_typer(db_app, name="db")
app.add_typer(scoring_app, name="scoring")
app.add_typer(awards_app, name="awards")
app.add_typer(standings_app, name="standings")

WeekOption = Annotated[int, typer.Option("--week", "-w", help="Week number", min=1)]
SeasonOption = Annotated[
    int | None,
    typer.Option("--season", "-s", help="Season year (defaults to PICKEM_DEFAULT_SEASON)"),
]
SeasonTypeOption = Annotated[
    SeasonType,
    typer.Option("--season-type", "-t", help="Season type"),
]


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]pickem-engine[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-V",
            help="Enable verbose output",
        ),
    ] = False,
) -> None:
    """Pick'em Scoring & Awards Engine CLI.

    Recomputes pick scoring after game results change, audits persisted
    scoring, and produces weekly awards and season standings.
    """
    configure_from_settings(get_settings(), verbose=verbose)


def _open_store():
    """Return a store over the configured database, exiting if it is missing."""
    from pickem_engine.data import SqlScoringStore, init_db

    settings = get_settings()
    if not settings.db_path_obj.exists():
        console.print("[red]Error: Database not found. Run 'db init' first.[/red]")
        raise typer.Exit(1)

    init_db()
    return SqlScoringStore()


def _week_key(week: int, season: int | None, season_type: SeasonType) -> WeekKey:
    if season is None:
        season = get_settings().default_season
    return WeekKey(week, season, season_type)


def _store_failure(e: PickemEngineError) -> typer.Exit:
    console.print(f"[red]Error: {e}[/red]")
    return typer.Exit(1)


# =============================================================================
# Database Commands
# =============================================================================


@db_app.command("init")
def db_init() -> None:
    """Create the database and its tables."""
    from pickem_engine.data import init_db

    settings = get_settings()
    settings.ensure_directories()
    init_db()

    console.print(
        Panel(
            f"[bold]Database:[/bold] {settings.db_path}\n"
            "[green]Tables ready.[/green]",
            title="Database Init",
        )
    )


@db_app.command("status")
def db_status() -> None:
    """Show row counts for games, picks and awards."""
    from sqlalchemy import func, select

    from pickem_engine.data import Award, Game, Pick, init_db, session_scope

    settings = get_settings()

    if not settings.db_path_obj.exists():
        console.print(
            Panel(
                f"[bold]Database:[/bold] {settings.db_path}\n"
                "[yellow]Database not found. Run 'db init' first.[/yellow]",
                title="Database Status",
            )
        )
        return

    init_db()

    with session_scope() as session:
        counts = [
            ("Games", session.scalar(select(func.count(Game.id)))),
            (
                "Completed games",
                session.scalar(
                    select(func.count(Game.id)).where(
                        Game.status == GameStatus.COMPLETED.value
                    )
                ),
            ),
            ("Picks", session.scalar(select(func.count(Pick.id)))),
            ("Awards", session.scalar(select(func.count(Award.id)))),
        ]

    table = Table(title="Database Status")
    table.add_column("Entity", style="cyan")
    table.add_column("Count", justify="right")
    for entity, count in counts:
        table.add_row(entity, str(count or 0))
    console.print(table)


# =============================================================================
# Scoring Commands
# =============================================================================


def _display_recompute_results(results) -> bool:
    """Print one row per recomputed game; return True if all were clean."""
    table = Table(title="Recompute Results")
    table.add_column("Game", style="cyan")
    table.add_column("Week", justify="right")
    table.add_column("Picks", justify="right")
    table.add_column("Updated", justify="right", style="green")
    table.add_column("Failed", justify="right", style="red")
    table.add_column("Status")

    clean = True
    for r in results:
        if not r.success:
            status = f"[red]{'not found' if r.not_found else r.error}[/red]"
            clean = False
        elif r.skipped:
            status = f"[yellow]skipped: {r.reason}[/yellow]"
        elif r.error_count:
            status = "[yellow]partial[/yellow]"
            clean = False
        else:
            status = "[green]ok[/green]"
        table.add_row(
            r.game_id,
            str(r.week) if r.week is not None else "-",
            str(r.total_picks),
            str(r.success_count),
            str(r.error_count),
            status,
        )

    console.print(table)
    return clean


@scoring_app.command("recompute")
def scoring_recompute(
    game_ids: Annotated[
        list[str],
        typer.Argument(help="Games to recompute"),
    ],
) -> None:
    """Recompute solo status and points for the given games."""
    from pickem_engine.jobs import GameRecomputationJob

    store = _open_store()
    results = GameRecomputationJob(store).run_many(game_ids)

    if not _display_recompute_results(results):
        raise typer.Exit(1)


@scoring_app.command("week")
def scoring_week(
    week: WeekOption,
    season: SeasonOption = None,
    season_type: SeasonTypeOption = SeasonType.REGULAR,
) -> None:
    """Recompute every game of one week."""
    from pickem_engine.jobs import GameRecomputationJob

    store = _open_store()
    key = _week_key(week, season, season_type)

    try:
        games = store.get_week_games(key)
    except PickemEngineError as e:
        raise _store_failure(e) from e

    if not games:
        console.print(f"[yellow]No games found for {key}.[/yellow]")
        return

    console.print(
        Panel(
            f"[bold]Week:[/bold] {key}\n[bold]Games:[/bold] {len(games)}",
            title="Week Recompute",
        )
    )
    results = GameRecomputationJob(store).run_many(g.id for g in games)

    if not _display_recompute_results(results):
        raise typer.Exit(1)


@scoring_app.command("validate")
def scoring_validate(
    game_id: Annotated[str, typer.Argument(help="Game to audit")],
) -> None:
    """Check a game's persisted scoring without changing it."""
    from pickem_engine.scoring import find_scoring_discrepancies, validate_game_scoring

    store = _open_store()

    try:
        game = store.get_game(GameId(game_id))
        picks = store.get_picks_for_game(game.id)
    except PickemEngineError as e:
        raise _store_failure(e) from e

    validation = validate_game_scoring(game, picks)
    # Scheduled games are never written by the job, so nothing can drift
    discrepancies = (
        []
        if game.status == GameStatus.SCHEDULED
        else find_scoring_discrepancies(game, picks)
    )

    score = (
        f"{game.away_score}-{game.home_score}"
        if game.home_score is not None and game.away_score is not None
        else "n/a"
    )
    console.print(
        Panel(
            f"[bold]Game:[/bold] {game.id} ({game.matchup})\n"
            f"[bold]Week:[/bold] {game.week_key}\n"
            f"[bold]Status:[/bold] {game.status.value}  [bold]Score:[/bold] {score}\n"
            f"[bold]Picks:[/bold] {len(picks)}",
            title="Scoring Validation",
        )
    )

    if discrepancies:
        table = Table(title="Discrepancies")
        table.add_column("Pick", style="cyan")
        table.add_column("Fields")
        table.add_column("Stored", justify="right")
        table.add_column("Expected", justify="right", style="green")
        for d in discrepancies:
            table.add_row(
                d.pick_id,
                ", ".join(d.changed_fields),
                str(d.actual.pick_points),
                str(d.expected.pick_points),
            )
        console.print(table)

    for issue in validation.issues:
        console.print(f"[red]- {issue}[/red]")

    if validation.is_valid and not discrepancies:
        console.print("[green]Scoring is consistent.[/green]")
        return

    raise typer.Exit(1)


@scoring_app.command("reconcile")
def scoring_reconcile(
    season: Annotated[
        int | None,
        typer.Option("--season", "-s", help="Restrict to one season"),
    ] = None,
) -> None:
    """Find completed games with incorrect scoring and fix them."""
    from pickem_engine.jobs import reconcile_scoring

    store = _open_store()

    try:
        result = reconcile_scoring(store, season=season)
    except PickemEngineError as e:
        raise _store_failure(e) from e

    if result.problem_games:
        table = Table(title="Problem Games")
        table.add_column("Game", style="cyan")
        table.add_column("Week", justify="right")
        table.add_column("Matchup")
        table.add_column("Picks", justify="right")
        table.add_column("Issues")
        for p in result.problem_games:
            table.add_row(
                p.game_id, str(p.week), p.matchup, str(p.incorrect_picks),
                "; ".join(p.issues),
            )
        console.print(table)

    status = "[green]ok[/green]" if result.success else "[red]failures[/red]"
    console.print(
        Panel(
            f"[bold]Games checked:[/bold] {result.games_checked}\n"
            f"[bold]Games fixed:[/bold] {result.games_fixed}\n"
            f"[bold]Picks fixed:[/bold] {result.picks_fixed}\n"
            f"[bold]Status:[/bold] {status}",
            title="Scoring Reconciliation",
        )
    )

    if not result.success:
        raise typer.Exit(1)


# =============================================================================
# Awards Commands
# =============================================================================


def _display_awards(awards: list[AwardCandidate], title: str) -> None:
    table = Table(title=title)
    table.add_column("Award", style="cyan")
    table.add_column("User")
    table.add_column("Points", justify="right")
    table.add_column("Record", justify="right")
    for a in awards:
        table.add_row(a.award_type.value, a.user_id, str(a.points), a.record)
    console.print(table)


@awards_app.command("process")
def awards_process(
    week: WeekOption,
    season: SeasonOption = None,
    season_type: SeasonTypeOption = SeasonType.REGULAR,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Compute awards without saving them"),
    ] = False,
) -> None:
    """Compute a week's awards and replace the stored set."""
    from pickem_engine.awards import WeeklyAwardsProcessor

    store = _open_store()
    key = _week_key(week, season, season_type)
    processor = WeeklyAwardsProcessor(store)

    try:
        completion = processor.check_week_completion(key)
    except PickemEngineError as e:
        raise _store_failure(e) from e

    console.print(
        Panel(
            f"[bold]Week:[/bold] {key}\n"
            f"[bold]Completed games:[/bold] "
            f"{completion.completed_games}/{completion.total_games}\n"
            f"[bold]Dry run:[/bold] {dry_run}",
            title="Weekly Awards",
        )
    )
    if not completion.all_completed:
        console.print("[yellow]Warning: not every game of this week is final.[/yellow]")

    result = processor.process_week(key, dry_run=dry_run)
    if not result.success:
        console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    if not result.awards:
        console.print("[yellow]No picks on completed games; no awards.[/yellow]")
        return

    _display_awards(result.awards, "Awards (preview)" if dry_run else "Awards")
    if not dry_run:
        console.print(f"[green]Saved {result.awards_created} award(s).[/green]")


@awards_app.command("sweep")
def awards_sweep(
    season: SeasonOption = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Reprocess weeks that already have awards"),
    ] = False,
) -> None:
    """Process awards for every completed week of a season."""
    from pickem_engine.awards import WeeklyAwardsProcessor

    store = _open_store()
    if season is None:
        season = get_settings().default_season

    sweep = WeeklyAwardsProcessor(store).process_completed_weeks(season, force=force)
    if sweep.error:
        console.print(f"[red]Error: {sweep.error}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"Awards Sweep ({season})")
    table.add_column("Week", style="cyan")
    table.add_column("Result")
    for r in sweep.processed:
        outcome = (
            f"[green]{r.awards_created} award(s)[/green]"
            if r.success
            else f"[red]{r.error}[/red]"
        )
        table.add_row(str(r.key), outcome)
    for key, reason in sweep.skipped:
        table.add_row(str(key), f"[yellow]skipped: {reason}[/yellow]")
    console.print(table)
    console.print(sweep.message)

    if not sweep.success:
        raise typer.Exit(1)


@awards_app.command("show")
def awards_show(
    week: WeekOption,
    season: SeasonOption = None,
    season_type: SeasonTypeOption = SeasonType.REGULAR,
) -> None:
    """Show the stored awards of a week."""
    store = _open_store()
    key = _week_key(week, season, season_type)

    try:
        awards = store.get_week_awards(key)
    except PickemEngineError as e:
        raise _store_failure(e) from e

    if not awards:
        console.print(f"[yellow]No awards stored for {key}.[/yellow]")
        return

    _display_awards(awards, f"Awards: {key}")


# =============================================================================
# Standings Commands
# =============================================================================


@standings_app.command("show")
def standings_show(
    season: SeasonOption = None,
    csv: Annotated[
        Path | None,
        typer.Option("--csv", help="Also write the standings to a CSV file"),
    ] = None,
) -> None:
    """Show season standings ranked by points and tiebreakers."""
    from pickem_engine.awards import compute_user_stats, rank_users, standings_frame

    store = _open_store()
    if season is None:
        season = get_settings().default_season

    try:
        picks = store.get_season_picks(season)
        games = store.get_season_games(season)
    except PickemEngineError as e:
        raise _store_failure(e) from e

    df = standings_frame(rank_users(compute_user_stats(picks, games)))
    if df.empty:
        console.print(f"[yellow]No scored picks for season {season}.[/yellow]")
        return

    table = Table(title=f"Standings {season}")
    table.add_column("#", justify="right")
    table.add_column("User", style="cyan")
    table.add_column("Points", justify="right", style="green")
    table.add_column("W-L", justify="right")
    table.add_column("Win %", justify="right")
    table.add_column("Streak", justify="right")
    table.add_column("Best", justify="right")
    for row in df.itertuples(index=False):
        table.add_row(
            str(row.rank),
            row.user_id,
            str(row.points),
            f"{row.wins}-{row.losses}",
            f"{row.win_pct:.1%}",
            str(row.current_streak),
            str(row.max_streak),
        )
    console.print(table)

    if csv is not None:
        csv.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(csv, index=False)
        console.print(f"[green]Wrote {len(df)} row(s) to {csv}[/green]")


if __name__ == "__main__":
    app()
