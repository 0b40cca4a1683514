"""Command line interface for BlogHub."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import typer
import uvicorn
from loguru import logger

from .config import AppConfig, load_config
from .config.inspector import check_config, explain_config
from .errors import BackendError, NotFoundError
from .log import configure_logging
from .models import BookmarkEntry
from .notifications import Notifier
from .services import LocalState, Services, build_services, open_local_state
from .storage.theme import THEME_COLORS, THEME_MODES
from .web import create_app


@dataclass(slots=True)
class CLIState:
    """Holds shared state between Typer commands."""

    config_path: Path
    notifier: Notifier = field(default_factory=Notifier)
    _config: AppConfig | None = None

    def ensure_config(self) -> AppConfig:
        if self._config is None:
            logger.info("Loading configuration from {}", self.config_path)
            self._config = load_config(AppConfig, self.config_path)
        return self._config

    def services(self) -> Services:
        config = self.ensure_config()
        try:
            return build_services(config, self.notifier)
        except (ValueError, EnvironmentError) as exc:
            logger.error("{}", exc)
            _exit(1)
            raise

    def local_state(self, *, with_site_defaults: bool = False) -> LocalState:
        config = self.ensure_config()
        default_theme, default_color = "system", "default"
        if with_site_defaults and config.backend is not None:
            try:
                settings = build_services(config, self.notifier).settings.get()
            except (BackendError, EnvironmentError) as exc:
                logger.warning("Site defaults unavailable, using built-in ones: {}", exc)
            else:
                default_theme, default_color = settings.default_theme, settings.default_theme_color
        return open_local_state(
            config, self.notifier, default_theme=default_theme, default_color=default_color
        )

    def close(self) -> None:
        """Drop the notifications of the finished command; loguru already showed them."""

        shown = self.notifier.drain()
        if shown:
            logger.debug("{} notification(s) shown", len(shown))


app = typer.Typer(help="BlogHub reader, admin and maintenance helpers")
config_app = typer.Typer(help="Validate and document configuration files")
app.add_typer(config_app, name="config")
articles_app = typer.Typer(help="Browse published articles")
app.add_typer(articles_app, name="articles")
bookmarks_app = typer.Typer(help="Manage the local reading list")
app.add_typer(bookmarks_app, name="bookmarks")
theme_app = typer.Typer(help="Local appearance preferences")
app.add_typer(theme_app, name="theme")


def _default_config_path() -> Path:
    repo_root = Path(__file__).resolve().parents[1]
    return repo_root / "config" / "example.toml"


def _normalize_format(value: str) -> str:
    return value.lower()


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise RuntimeError("CLI context is not initialised")
    return state


def _exit(code: int) -> None:
    raise typer.Exit(code)


def _echo_entry(entry: BookmarkEntry) -> None:
    typer.echo(f"{entry.id}\t{entry.slug}\t{entry.category}\t{entry.title}")


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    config: Path = typer.Option(
        _default_config_path(),
        help="Path to the TOML configuration file",
    ),
) -> None:
    """Initialise CLI state."""

    ctx.obj = CLIState(config_path=config.resolve())
    ctx.call_on_close(ctx.obj.close)

    if ctx.invoked_subcommand is None:
        logger.warning("No command provided. Try 'status' or 'articles list'.")
        _exit(0)


@app.command(help="Show configuration status")
def status(ctx: typer.Context) -> None:
    config = _get_state(ctx).ensure_config()
    _report_status(config)


@app.command(help="Run the blog web server")
def serve(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", help="Host to bind the server to"),
    port: int = typer.Option(8000, help="Port to bind the server to"),
    dry_run: bool = typer.Option(
        False,
        help="Build the application and report status without running the server",
    ),
) -> None:
    state = _get_state(ctx)
    config = state.ensure_config()

    try:
        app_instance = create_app(config)
    except (ValueError, EnvironmentError) as exc:
        logger.error("Cannot start the server: {}", exc)
        _exit(1)
        return

    if dry_run:
        logger.info("[Dry Run] {} routes registered; server will not be started.", len(app_instance.routes))
        return

    configure_logging(config.logging_level)
    uvicorn.run(app_instance, host=host, port=port)


@app.command(help="Create backend tables, functions and seed data")
def setup(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    services = state.services()
    function = state.ensure_config().backend.setup_function  # type: ignore[union-attr]

    try:
        result = services.client.invoke_function(function)
    except BackendError as exc:
        logger.error("Database setup failed: {}", exc)
        _exit(1)
        return

    logger.success("Database setup complete via '{}'", function)
    if result:
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False, default=str))


@articles_app.command("list", help="List published articles")
def articles_list(
    ctx: typer.Context,
    category: str | None = typer.Option(None, help="Only show articles in this category"),
    search: str = typer.Option("", help="Match against title and excerpt"),
) -> None:
    from .articles import search_articles

    services = _get_state(ctx).services()
    try:
        articles = services.articles.list_published()
    except BackendError as exc:
        logger.error("Failed to load articles: {}", exc)
        _exit(1)
        return

    selected = search_articles(articles, search, category)
    if not selected:
        logger.info("No articles found matching your criteria.")
        return
    for article in selected:
        typer.echo(f"{article.slug}\t{article.category}\t{article.view_count} views\t{article.title}")


@articles_app.command("show", help="Show one article and record a view")
def articles_show(ctx: typer.Context, slug: str) -> None:
    services = _get_state(ctx).services()
    try:
        article = services.articles.get_by_slug(slug)
    except NotFoundError:
        logger.error("Article '{}' not found", slug)
        _exit(1)
        return
    except BackendError as exc:
        logger.error("Failed to load article: {}", exc)
        _exit(1)
        return

    typer.echo(article.title)
    typer.echo(
        f"{article.author_name} | {article.date[:10]} | {article.read_time} | {article.view_count} views"
    )
    if article.tags:
        typer.echo("Tags: " + ", ".join(article.tags))
    typer.echo("")
    typer.echo(article.content)


@bookmarks_app.command("list", help="Show the reading list")
def bookmarks_list(
    ctx: typer.Context,
    search: str = typer.Option("", help="Match against title and excerpt"),
    category: str | None = typer.Option(None, help="Only show entries in this category"),
) -> None:
    bookmarks = _get_state(ctx).local_state().bookmarks
    if not len(bookmarks):
        logger.info("Your reading list is empty.")
        return

    entries = bookmarks.filter(search, category)
    logger.info("{} of {} saved articles", len(entries), bookmarks.limit)
    for entry in entries:
        _echo_entry(entry)


def _fetch_entry(state: CLIState, slug: str) -> BookmarkEntry:
    services = state.services()
    try:
        article = services.articles.get_by_slug(slug, count_view=False)
    except NotFoundError:
        logger.error("Article '{}' not found", slug)
        _exit(1)
        raise
    except BackendError as exc:
        logger.error("Failed to load article: {}", exc)
        _exit(1)
        raise
    return BookmarkEntry.from_article(article)


@bookmarks_app.command("add", help="Save an article to the reading list")
def bookmarks_add(ctx: typer.Context, slug: str) -> None:
    state = _get_state(ctx)
    bookmarks = state.local_state().bookmarks
    if not bookmarks.add(_fetch_entry(state, slug)) and bookmarks.is_full:
        _exit(1)


@bookmarks_app.command("remove", help="Remove an entry by article id or slug")
def bookmarks_remove(ctx: typer.Context, key: str) -> None:
    bookmarks = _get_state(ctx).local_state().bookmarks
    entry = bookmarks.get(key) or bookmarks.find_by_slug(key)
    if entry is None or not bookmarks.remove(entry.id):
        logger.error("'{}' is not in your reading list", key)
        _exit(1)


@bookmarks_app.command("toggle", help="Save or remove an article")
def bookmarks_toggle(ctx: typer.Context, slug: str) -> None:
    state = _get_state(ctx)
    bookmarks = state.local_state().bookmarks
    saved = bookmarks.find_by_slug(slug)
    if saved is not None:
        bookmarks.toggle(saved)
        return
    if not bookmarks.toggle(_fetch_entry(state, slug)) and bookmarks.is_full:
        _exit(1)


@bookmarks_app.command("clear", help="Empty the reading list")
def bookmarks_clear(ctx: typer.Context) -> None:
    _get_state(ctx).local_state().bookmarks.clear()


@theme_app.command("show", help="Show the current appearance")
def theme_show(ctx: typer.Context) -> None:
    theme = _get_state(ctx).local_state(with_site_defaults=True).theme
    typer.echo(f"mode: {theme.theme}")
    typer.echo(f"color: {theme.color}")


@theme_app.command("set", help="Change the appearance")
def theme_set(
    ctx: typer.Context,
    mode: str | None = typer.Option(None, "--mode", help=f"One of {', '.join(THEME_MODES)}"),
    color: str | None = typer.Option(None, "--color", help=f"One of {', '.join(THEME_COLORS)}"),
) -> None:
    if mode is None and color is None:
        logger.error("Nothing to change; pass --mode and/or --color")
        _exit(2)

    theme = _get_state(ctx).local_state().theme
    try:
        if mode is not None:
            theme.set_theme(mode.lower())
        if color is not None:
            theme.set_color(color.lower())
    except ValueError as exc:
        logger.error("{}", exc)
        _exit(2)
        return
    logger.info("Appearance set to {} / {}", theme.theme, theme.color)


@config_app.command(help="Validate the configuration file")
def check(
    ctx: typer.Context,
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for validation results",
        callback=_normalize_format,
    ),
) -> None:
    state = _get_state(ctx)
    result, exit_code, _ = check_config(state.config_path)

    if format == "json":
        print(json.dumps(result, indent=2, ensure_ascii=False, default=str))
        _exit(exit_code)

    if result["status"] == "ok":
        logger.info("Configuration OK: {}", result["config_path"])
        for warning in result["warnings"]:
            logger.warning(warning)
    else:
        error: dict[str, Any] = result["error"]
        logger.error(
            "Configuration error ({}) for {}: {}",
            error["type"],
            result["config_path"],
            error["message"],
        )
        for detail in error.get("details", []):
            location = detail["loc"] or "<root>"
            logger.error("  - {}: {} ({})", location, detail["message"], detail["type"])

    _exit(exit_code)


@config_app.command(help="Describe available configuration fields")
def explain(
    format: str = typer.Option(  # noqa: A002 - match CLI option name
        "text",
        "--format",
        case_sensitive=False,
        help="Output format for configuration schema",
        callback=_normalize_format,
    ),
) -> None:
    fields = explain_config()

    if format == "json":
        print(json.dumps({"fields": fields}, indent=2, ensure_ascii=False, default=str))
        return

    logger.info("Configuration schema ({} fields):", len(fields))
    for item in fields:
        default_value = item["default"]
        if isinstance(default_value, (dict, list)):
            default_repr = json.dumps(default_value, ensure_ascii=False, default=str)
        elif default_value is None:
            default_repr = "None"
        else:
            default_repr = str(default_value)
        logger.info(
            "  - {name}: type={type}, required={required}, default={default}, description={description}",
            name=item["name"],
            type=item["type"],
            required="yes" if item["required"] else "no",
            default=default_repr,
            description=item["description"] or "(no description)",
        )


def _report_status(config: AppConfig) -> None:
    """Print the loaded configuration, one section at a time."""
    logger.info("=== General Configuration ===")
    logger.info("Logging level: {}", config.logging_level)

    logger.info("\n=== Backend ===")
    if config.backend:
        logger.info("URL: {}", config.backend.url)
        logger.info("Timeout: {}s", config.backend.timeout)
        logger.info("Setup function: {}", config.backend.setup_function)
    else:
        logger.info("Not configured")

    logger.info("\n=== Local Storage ===")
    logger.info("Path: {}", config.storage.path)
    logger.info("Reading list limit: {}", config.storage.bookmark_limit)

    logger.info("\n=== Web ===")
    logger.info("Pages enabled: {}", config.web.enabled)
    logger.info("Title: {}", config.web.title)
    logger.info("Session header: {} (ttl={} min)", config.web.session_header, config.web.session_ttl_minutes)


def main(argv: list[str] | None = None) -> int:
    """Entry point compatible with setuptools console scripts."""

    try:
        result = app(args=argv, standalone_mode=False)
    except typer.Exit as exc:
        return exc.exit_code
    if isinstance(result, int):
        return result
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
