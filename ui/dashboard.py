"""Real-time CLI dashboard for proxy monitoring."""

from datetime import datetime
from threading import Lock

from rich.console import Console
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.config import Config
from ui.log_utils import mask_secret, truncate, write_cli_log

console = Console()


class RequestInfo:
    """Info about a single proxied request."""

    def __init__(self, method: str, path: str, status: int, credential: str, timestamp: datetime):
        self.method = method
        self.path = truncate(path, 60)
        self.status = status
        self.credential = credential
        self.timestamp = timestamp


class Dashboard:
    """Real-time dashboard showing proxied files, rejections and errors."""

    def __init__(self, config: Config):
        self.config = config
        self._lock = Lock()
        self._recent: list[RequestInfo] = []
        self._max_recent = 10
        self._request_count = {"proxied": 0, "rejected": 0, "home": 0}
        self._errors: list[str] = []
        self._live: Live | None = None

    def start(self) -> "Dashboard":
        """Start the live dashboard."""
        self._live = Live(
            self._build_layout(),
            console=console,
            refresh_per_second=4,
            screen=False,
        )
        self._live.start()
        return self

    def stop(self) -> None:
        """Stop the live dashboard."""
        if self._live:
            self._live.stop()

    def log_proxied(
        self,
        method: str,
        path: str,
        target_url: str,
        *,
        status: int,
        credential: str | None = None,
    ) -> None:
        """Log a request relayed to the origin."""
        masked = mask_secret(credential)
        with self._lock:
            self._request_count["proxied"] += 1
            self._recent.insert(
                0,
                RequestInfo(
                    method=method,
                    path=path,
                    status=status,
                    credential=masked,
                    timestamp=datetime.now(),
                ),
            )
            self._recent = self._recent[: self._max_recent]
            self._refresh()

            write_cli_log("PROXY", f"{method} {path}", target=target_url, status=status, token=masked)

    def log_rejected(self, path: str, status: int, reason: str) -> None:
        """Log a request refused before contacting the origin."""
        with self._lock:
            self._request_count["rejected"] += 1
            self._errors.insert(0, f"{status} {truncate(path, 30)}: {reason}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("REJECT", reason, path=path, status=status)

    def log_home(self, action: str, target: str | None = None) -> None:
        """Log a root path request."""
        with self._lock:
            self._request_count["home"] += 1
            self._refresh()
            write_cli_log("HOME", action, target=target or "-")

    def log_error(self, route: str, status: int, message: str) -> None:
        """Log an error."""
        with self._lock:
            self._errors.insert(0, f"{route} {status}: {truncate(message, 50)}")
            self._errors = self._errors[:3]
            self._refresh()
            write_cli_log("ERROR", message[:200], route=route, status=status)

    def _refresh(self) -> None:
        """Refresh the display."""
        if self._live:
            self._live.update(self._build_layout())

    def _build_layout(self) -> Layout:
        """Build the dashboard layout."""
        layout = Layout()

        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=5),
        )

        layout["header"].update(self._build_header())
        layout["body"].update(self._build_requests_panel())
        layout["footer"].update(self._build_footer())

        return layout

    def _build_header(self) -> Panel:
        """Build header with stats."""
        repository = self.config.repository
        target = "/".join(p for p in (repository.owner, repository.name, repository.branch) if p)

        stats = Text()
        stats.append("GitHub Raw Proxy", style="bold cyan")
        stats.append("  |  ")
        stats.append(f"Proxied: {self._request_count['proxied']}", style="green")
        stats.append("  |  ")
        stats.append(f"Rejected: {self._request_count['rejected']}", style="yellow")
        stats.append("  |  ")
        stats.append(f"Home: {self._request_count['home']}", style="blue")
        stats.append("  |  ")
        stats.append(f"Repo: {target or '(from path)'}", style="dim")
        stats.append("  |  ")
        stats.append(f"Port: {self.config.proxy.port}", style="dim")

        return Panel(stats, style="cyan")

    def _build_requests_panel(self) -> Panel:
        """Build the recent requests panel."""
        if self._recent:
            table = Table(show_header=True, header_style="bold", expand=True, box=None)
            table.add_column("Time", style="dim", width=8)
            table.add_column("Method", width=7)
            table.add_column("Path", ratio=3)
            table.add_column("Status", width=6)
            table.add_column("Token", ratio=1)

            for info in self._recent:
                style = "green" if 200 <= info.status < 300 else "red"
                table.add_row(
                    info.timestamp.strftime("%H:%M:%S"),
                    info.method,
                    info.path,
                    Text(str(info.status), style=style),
                    info.credential,
                )

            content = table
        else:
            content = Text("Waiting for requests...", style="dim")

        return Panel(content, title="[green]Recent Requests[/green]", border_style="green")

    def _build_footer(self) -> Panel:
        """Build footer with errors and help."""
        if self._errors:
            error_text = Text()
            for err in self._errors:
                error_text.append("! ", style="red bold")
                error_text.append(err + "\n", style="red")
            content = error_text
        else:
            content = Text(
                f"Fetch files from http://{self.config.proxy.host}:{self.config.proxy.port}/<path>?token=...",
                style="dim",
            )

        return Panel(content, title="[dim]Status[/dim]", border_style="dim")
