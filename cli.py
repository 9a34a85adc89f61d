"""CLI entry point for ghraw-proxy."""

import sys
from datetime import datetime

from rich.console import Console
from rich.table import Table

from app import create_app
from core.config import CONFIG_FILE, Config, load_config
from core.exceptions import ConfigurationError
from core.scopes import parse_scope_rules
from ui.dashboard import Dashboard
from ui.log_utils import CLI_LOG_FILE, mask_secret, write_cli_log

console = Console()


def main():
    """Main CLI entry point."""
    try:
        config = load_config()
    except ConfigurationError as e:
        console.print(f"[red][ERROR][/red] {e}")
        sys.exit(1)

    # Handle CLI arguments
    if len(sys.argv) > 1:
        arg = sys.argv[1]

        if arg == "--config":
            _print_config(config)
            return

        if arg in ("--help", "-h"):
            _print_help()
            return

    auth = config.auth
    if not (auth.upstream_token or auth.alias_token):
        console.print("[yellow]Warning:[/yellow] No GH_TOKEN or TOKEN set; clients must pass ?token=")
    if auth.token_path and not auth.upstream_token:
        console.print("[yellow]Warning:[/yellow] TOKEN_PATH is set without GH_TOKEN; scoped paths will fail")

    dashboard = Dashboard(config)

    import uvicorn

    app = create_app(config, dashboard)

    uvicorn_config = uvicorn.Config(
        app,
        host=config.proxy.host,
        port=config.proxy.port,
        log_level="warning",
        timeout_keep_alive=config.limits.keep_alive_timeout,
    )
    server = uvicorn.Server(uvicorn_config)

    dashboard.start()
    start_time = datetime.now()
    write_cli_log("STARTUP", "Proxy started", host=config.proxy.host, port=config.proxy.port)
    try:
        server.run()
    finally:
        duration = datetime.now() - start_time
        write_cli_log("SHUTDOWN", "Proxy stopped", duration=str(duration))
        dashboard.stop()


def _print_config(config: Config) -> None:
    """Print config locations and the effective settings, secrets masked."""
    console.print(f"[bold]Config:[/bold] {CONFIG_FILE}")
    console.print(f"[bold]Log:[/bold] {CLI_LOG_FILE}")

    table = Table(show_header=False, box=None)
    table.add_column(style="bold")
    table.add_column()
    repository = config.repository
    table.add_row("Listen", f"{config.proxy.host}:{config.proxy.port}")
    table.add_row("Upstream", config.upstream.base_url)
    location = "/".join(p for p in (repository.owner, repository.name, repository.branch) if p)
    table.add_row("Repository", location or "-")
    table.add_row("GH_TOKEN", mask_secret(config.auth.upstream_token))
    table.add_row("TOKEN", mask_secret(config.auth.alias_token))
    for rule in parse_scope_rules(config.auth.token_path):
        table.add_row("Scoped path", f"{rule.scope_path} ({mask_secret(rule.required_secret)})")
    table.add_row("URL302", config.home.redirect_pool or "-")
    table.add_row("URL", config.home.origin_pool or "-")
    console.print(table)


def _print_help():
    """Print help message."""
    help_text = """
[bold cyan]GitHub Raw Proxy[/bold cyan]

Serves files from a private GitHub repository through raw.githubusercontent.com
without exposing the GitHub token to clients.

[bold]Usage:[/bold]
    ghraw-proxy              Start with live dashboard
    ghraw-proxy --config     Show config location and effective settings
    ghraw-proxy --help       Show this help

[bold]Environment:[/bold]
    GH_NAME, GH_REPO, GH_BRANCH   Default repository location
    GH_TOKEN                      GitHub token sent upstream (never shown to clients)
    TOKEN                         Public alias that clients may pass as ?token=
    TOKEN_PATH                    Scoped secrets, e.g. "secret@/private,other@/docs"
    URL302 / URL                  Root path redirect pool / origin pool
    ERROR                         Body returned when GitHub answers with an error
    PROXY_HOST, PROXY_PORT        Listen address
"""
    console.print(help_text)


if __name__ == "__main__":
    main()
