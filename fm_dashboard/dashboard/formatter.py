"""
Rich formatter module for FM Dashboard.

Handles all Rich-based CLI formatting for the priority inbox and the KPI
snapshot. Only consumes computed results; it never scores or aggregates.
"""

from typing import List, Optional

from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from fm_dashboard.dashboard.aggregator import KPIMetrics, format_trend, kpi_status
from fm_dashboard.dashboard.prioritizer import PriorityItem, summarize_inbox


# Badge styles per urgency level
LEVEL_STYLES = {
    "CRITICAL": "red bold",
    "HIGH": "yellow",
    "MEDIUM": "white",
}

# Card styles per KPI health label
STATUS_STYLES = {
    "success": "green",
    "warning": "yellow",
    "critical": "red bold",
    "default": "white",
}


class DashboardFormatter:
    """
    Rich-based formatter for the work-order dashboard.
    """

    def __init__(self, console: Optional[Console] = None):
        """
        Initialize formatter.

        Args:
            console: Rich Console instance (creates default if not provided)
        """
        self.console = console or Console()

    def _format_level(self, item: PriorityItem) -> str:
        """Format urgency level as colored badge."""
        style = LEVEL_STYLES.get(item.urgency_level, "white")
        return f"[{style}]{item.urgency_level}[/{style}]"

    def _format_due(self, item: PriorityItem) -> str:
        """Color the due label by urgency."""
        label = item.due_label
        if label.endswith("overdue"):
            return f"[red bold]{label}[/red bold]"
        if label in ("Today", "Tomorrow"):
            return f"[yellow]{label}[/yellow]"
        return f"[dim]{label}[/dim]"

    def format_briefing(self, items: List[PriorityItem]) -> Text:
        """One-line morning briefing over the top of the inbox."""
        summary = summarize_inbox(items)
        text = Text()
        text.append(f"{summary['critical']} critical items need immediate attention.")
        if summary["property_impacting"] > 0:
            text.append(
                f" {summary['property_impacting']} items affecting tenant operations.",
                style="red",
            )
        return text

    def format_inbox(self, items: List[PriorityItem], top_n: int = 5) -> Panel:
        """
        Create panel showing the priority inbox.

        Args:
            items: Ordered inbox items
            top_n: Maximum rows to show

        Returns:
            Rich Panel with the inbox table
        """
        if not items:
            content = Text("No open work orders", style="dim", justify="center")
            return Panel(
                content,
                title="[bold]Priority Inbox[/bold]",
                border_style="green",
                padding=(0, 1),
            )

        table = Table(
            show_header=True,
            header_style="bold",
            box=None,
            padding=(0, 1),
            expand=True,
        )
        table.add_column("Score", width=5, justify="right")
        table.add_column("Level", width=8)
        table.add_column("ID", width=8, no_wrap=True)
        table.add_column("Work Order", ratio=1)
        table.add_column("Due", width=15, justify="right")

        for item in items[:top_n]:
            title = item.title[:40] + "..." if len(item.title) > 40 else item.title
            title = escape(title)
            if item.is_property_impacting:
                title = f"[red]![/red] {title}"
            table.add_row(
                f"[bold]{item.urgency_score}[/bold]",
                self._format_level(item),
                f"[dim]{escape(item.id)}[/dim]",
                f"{title} [dim]· {escape(item.property_name)} · {item.status}[/dim]",
                self._format_due(item),
            )

        if len(items) > top_n:
            table.add_row("", "", "", f"[dim]+ {len(items) - top_n} more...[/dim]", "")

        return Panel(
            Group(self.format_briefing(items), Text(""), table),
            title=f"[bold]Priority Inbox ({len(items)} items)[/bold]",
            border_style="red",
            padding=(0, 1),
        )

    def format_kpis(self, metrics: KPIMetrics) -> Panel:
        """
        Create panel showing the KPI snapshot.

        Args:
            metrics: Aggregated metrics

        Returns:
            Rich Panel with one row per metric
        """
        status = kpi_status(metrics)

        table = Table(show_header=False, box=None, padding=(0, 1), expand=True)
        table.add_column("Metric", ratio=1)
        table.add_column("Value", width=12, justify="right")

        rows = [
            ("Due Today", "due_today", str(metrics.due_today)),
            ("Overdue", "overdue", str(metrics.overdue)),
            ("Critical", "critical", str(metrics.critical)),
            ("On-Time Rate", "on_time_rate", f"{metrics.on_time_rate}%"),
            ("Avg Completion", "avg_completion_time", f"{metrics.avg_completion_time}d"),
            ("Closure Rate", "closure_rate", f"{metrics.closure_rate}%"),
        ]
        for label, key, value in rows:
            style = STATUS_STYLES[status[key]]
            table.add_row(label, f"[{style}]{value}[/{style}]")

        if metrics.weekly_trend > 0:
            trend_style = "green"
        elif metrics.weekly_trend < 0:
            trend_style = "red"
        else:
            trend_style = "dim"
        table.add_row("Weekly Trend", f"[{trend_style}]{format_trend(metrics.weekly_trend)}[/{trend_style}]")

        if metrics.excluded_records:
            table.add_row(
                "[dim]Excluded (invalid dates)[/dim]",
                f"[yellow]{metrics.excluded_records}[/yellow]",
            )

        return Panel(
            table,
            title="[bold]Performance[/bold]",
            border_style="blue",
            padding=(0, 1),
        )

    def render_inbox(self, items: List[PriorityItem], top_n: int = 5) -> None:
        self.console.print(self.format_inbox(items, top_n))

    def render_kpis(self, metrics: KPIMetrics) -> None:
        self.console.print(self.format_kpis(metrics))

    def render_dashboard(
        self,
        items: List[PriorityItem],
        metrics: KPIMetrics,
        top_n: int = 5
    ) -> None:
        """
        Render inbox and KPIs to console.

        Args:
            items: Ordered inbox items
            metrics: KPI snapshot
            top_n: Inbox rows to show
        """
        self.render_kpis(metrics)
        self.console.print()
        self.render_inbox(items, top_n)
