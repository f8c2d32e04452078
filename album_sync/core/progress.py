"""
Progress bar handling for album-sync using the Rich library.

Two bars are provided, one per batch operation:
    - StatusProgressBar: sync-status checks against the target
    - SyncProgressBar: sequential add/remove run over the selection

Usage:
    from album_sync.core.progress import SyncProgressBar

    with SyncProgressBar(total=len(selection)) as progress:
        summary = await orchestrator.run(
            catalog, selection, target,
            on_result=lambda m: progress.update(m.action, m.ok),
        )
"""

from abc import ABC, abstractmethod
from typing import Optional

from rich import get_console
from rich.console import JustifyMethod, OverflowMethod
from rich.progress import (
    BarColumn,
    Progress,
    ProgressColumn,
    Task,
    TaskID,
)
from rich.style import StyleType
from rich.text import Text
from rich.theme import Theme


# =============================================================================
# Common Theme
# =============================================================================

PROGRESS_THEME = Theme({
    "bar.back": "grey23",
    "bar.complete": "rgb(165,66,129)",
    "bar.finished": "rgb(114,156,31)",
    "bar.pulse": "rgb(165,66,129)",
    "progress.percentage": "white",
})


# =============================================================================
# Custom Column
# =============================================================================

class SizedTextColumn(ProgressColumn):
    """
    Text column truncated with an ellipsis when it exceeds a fixed width.
    """

    def __init__(
        self,
        text_format: str,
        style: StyleType = "none",
        justify: JustifyMethod = "left",
        markup: bool = True,
        overflow: Optional[OverflowMethod] = None,
        width: int = 20,
    ) -> None:
        self.text_format = text_format
        self.justify: JustifyMethod = justify
        self.style = style
        self.markup = markup
        self.overflow: Optional[OverflowMethod] = overflow
        self.width = width
        super().__init__()

    def render(self, task: Task) -> Text:
        _text = self.text_format.format(task=task)
        if self.markup:
            text = Text.from_markup(_text, style=self.style, justify=self.justify)
        else:
            text = Text(_text, style=self.style, justify=self.justify)

        text.truncate(max_width=self.width, overflow=self.overflow, pad=True)
        return text


# =============================================================================
# Base Progress Bar
# =============================================================================

class BaseProgressBar(ABC):
    """
    Abstract base class for all progress bars.

    Provides:
    - Rich Progress instance with the shared theme
    - Context manager support (__enter__/__exit__)
    - Manual start/stop control
    - log() for printing above the bar

    Subclasses must implement _get_status_text() and update().
    """

    def __init__(
        self,
        total: int,
        description: str,
        status_width: int = 35
    ):
        """
        Args:
            total: Total number of items to process.
            description: Description to show on the left (e.g., "Syncing").
            status_width: Width of the status column.
        """
        self.total = total
        self.description = description
        self.completed = 0

        self.console = get_console()

        self.progress = Progress(
            SizedTextColumn(
                "[white]{task.description}",
                overflow="ellipsis",
                width=15,
            ),
            SizedTextColumn(
                "{task.fields[status]}",
                width=status_width,
                style="white",
            ),
            BarColumn(bar_width=40, finished_style="green"),
            "[progress.percentage]{task.percentage:>3.0f}%",
            console=self.console,
            transient=False,
            refresh_per_second=10,
        )

        self.task_id: Optional[TaskID] = None
        self._started = False

    def __enter__(self) -> "BaseProgressBar":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()

    def start(self) -> None:
        """Start the progress bar (can be called manually)."""
        if not self._started:
            self.console.push_theme(PROGRESS_THEME)
            self.progress.start()
            self.task_id = self.progress.add_task(
                description=self.description,
                total=self.total,
                status=self._get_status_text(),
            )
            self._started = True

    def stop(self) -> None:
        """Stop the progress bar and restore the console theme."""
        if self._started:
            self.progress.stop()
            self.console.pop_theme()
            self._started = False

    def log(self, message: str) -> None:
        """Print a message above the progress bar."""
        self.progress.console.print(message, highlight=False)

    def _update_progress(self) -> None:
        if self.task_id is not None:
            self.progress.update(
                self.task_id,
                completed=self.completed,
                status=self._get_status_text(),
            )

    @abstractmethod
    def _get_status_text(self) -> str:
        """Formatted status string with Rich markup."""
        pass

    @abstractmethod
    def update(self, *args, **kwargs) -> None:
        """Record one completed item. Signature varies by bar."""
        pass


# =============================================================================
# Sync Status Checks
# =============================================================================

class StatusProgressBar(BaseProgressBar):
    """
    Progress bar for the sync-status checks.

    Example:
        Checking        ✓ 45  · 12  ✗ 1         ━━━━━━━━━━━━━━━━━  80%

    ✓ albums on target, · albums not on target, ✗ checks that failed.
    """

    def __init__(self, total: int, description: str = "Checking"):
        super().__init__(total=total, description=description)
        self.on_target = 0
        self.missing = 0
        self.failed = 0

    def _get_status_text(self) -> str:
        parts = [
            f"[green]✓ {self.on_target}[/green]",
            f"[white]· {self.missing}[/white]",
        ]
        if self.failed > 0:
            parts.append(f"[red]✗ {self.failed}[/red]")
        return "  ".join(parts)

    def update(self, synced: bool | None) -> None:
        """
        Args:
            synced: Result of the check, or None if the check failed.
        """
        self.completed += 1
        if synced is None:
            self.failed += 1
        elif synced:
            self.on_target += 1
        else:
            self.missing += 1

        self._update_progress()


# =============================================================================
# Sync Run
# =============================================================================

class SyncProgressBar(BaseProgressBar):
    """
    Progress bar for the sequential add/remove run.

    Example:
        Syncing         ✓ 12  🗑 3  ✗ 1           ━━━━━━━━━━━━━━━━━  64%
    """

    def __init__(self, total: int, description: str = "Syncing"):
        super().__init__(total=total, description=description)
        self.added = 0
        self.removed = 0
        self.failed = 0

    def _get_status_text(self) -> str:
        parts = [
            f"[green]✓ {self.added}[/green]",
            f"[yellow]🗑 {self.removed}[/yellow]",
        ]
        if self.failed > 0:
            parts.append(f"[red]✗ {self.failed}[/red]")
        return "  ".join(parts)

    def update(self, action: str, success: bool) -> None:
        """
        Args:
            action: "add" or "remove".
            success: Whether the service reported success.
        """
        self.completed += 1
        if not success:
            self.failed += 1
        elif action == "remove":
            self.removed += 1
        else:
            self.added += 1

        self._update_progress()


__all__ = [
    "PROGRESS_THEME",
    "SizedTextColumn",
    "BaseProgressBar",
    "StatusProgressBar",
    "SyncProgressBar",
]
