"""console progress for long running downloads."""

from contextlib import contextmanager
from typing import Optional
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn


class ProgressManager:
    """shows spinners while distributions download and extract."""

    def __init__(self, console: Optional[Console] = None):
        """
        args:
            console: optional rich console instance. if not provided, one writing to stderr is created.
        """
        self.console = console or Console(stderr=True)
        self._enabled = self._should_show_progress()

    def _should_show_progress(self) -> bool:
        """
        check if we should show spinners.

        returns false when the console is not a terminal (ci, pytest, piped output).
        """
        return self.console.is_terminal

    @contextmanager
    def spinner(self, description: str, transient: bool = True):
        """
        show an indeterminate spinner for a download of unknown duration.

        args:
            description: text to display next to spinner
            transient: if true, spinner disappears when done

        yields:
            task id for the spinner, or None in non-interactive mode
        """
        if not self._enabled:
            yield None
            return

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=transient,
        ) as progress:
            task_id = progress.add_task(description, total=None)
            yield task_id
