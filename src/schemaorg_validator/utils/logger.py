"""
Logging with Rich for validation runs, sanitization and ontology builds.
"""

import json
import logging
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text
from rich import box


class ValidationLogger:
    """Logger for validation runs, on the console with Rich and in a .log file."""

    def __init__(self, log_dir: str = "logs", show_banner: bool = True, record_html: bool = True):
        """
        Initialize the logger.

        Args:
            log_dir: Directory for the log files
            show_banner: Print the run banner on the console
            record_html: Keep console output in memory for the HTML export.
                Long-running processes pass False, the .log file is still written.
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # Unique run ID
        self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file = self.log_dir / f"run_{self.run_id}.log"
        self.html_file = self.log_dir / f"run_{self.run_id}.html"

        self.console = Console()

        # Recording console for the HTML export
        self.html_console: Optional[Console] = None
        if record_html:
            self.html_console = Console(
                record=True,
                width=120,
                force_terminal=True,
                force_interactive=False
            )

        # Counters
        self.records_validated = 0
        self.records_invalid = 0
        self.violations_total = 0
        self.records_sanitized = 0

        self._write_to_file(self._make_header())

        if show_banner:
            self._show_banner()

    def _make_header(self):
        """Build the header of the .log file."""
        header = []
        header.append("╔" + "═"*78 + "╗")
        header.append("║" + "    SCHEMA.ORG VALIDATOR - RUN LOG".center(78) + "║")
        header.append("║" + f"    Run ID: {self.run_id}".ljust(78) + "║")
        header.append("║" + f"    Timestamp: {datetime.now().isoformat()}".ljust(78) + "║")
        header.append("╚" + "═"*78 + "╝")
        return "\n".join(header) + "\n\n"

    def _show_banner(self):
        banner = Text()
        banner.append("Schema.org Validator\n", style="bold cyan")
        banner.append(f"Run ID: {self.run_id}\n", style="dim")
        banner.append(f"Log file: {self.log_file}", style="dim")

        self.console.print(Panel(banner, box=box.DOUBLE, border_style="cyan"))
        self.console.print()

    def _write_to_file(self, content: str):
        with open(self.log_file, 'a', encoding='utf-8') as f:
            f.write(content)

    def _print(self, renderable=""):
        """Print to the console and to the recording console."""
        self.console.print(renderable)
        if self.html_console is not None:
            self.html_console.print(renderable)

    def log_validation(self, source: str, record_type: Optional[str], violations: Sequence[Any]):
        """
        Log the outcome of one validation.

        Args:
            source: Where the record came from (file name, request id, ...)
            record_type: The record's @type, if any
            violations: Violations returned by the engine
        """
        self.records_validated += 1
        self.violations_total += len(violations)
        timestamp = datetime.now().strftime("%H:%M:%S")
        label = record_type or "<untyped>"

        if not violations:
            self._print(f"[bold green][{timestamp}] ✔ {source}[/bold green] [dim]({label})[/dim]")
            self._write_to_file(f"[{timestamp}] VALID {source} ({label})\n")
            return

        self.records_invalid += 1
        table = Table(
            title=f"✘ {source} ({label}): {len(violations)} violation(s)",
            box=box.SIMPLE,
            show_header=True,
            title_style="bold red"
        )
        table.add_column("Path", style="cyan")
        table.add_column("Kind", style="magenta")
        table.add_column("Message", style="white")
        for violation in violations:
            table.add_row(violation.path or "<root>", violation.kind.value, violation.message)
        self._print(table)

        log_content = [f"[{timestamp}] INVALID {source} ({label}): {len(violations)} violation(s)"]
        for violation in violations:
            log_content.append(f"  - {violation.path or '<root>'} [{violation.kind.value}] {violation.message}")
        self._write_to_file("\n".join(log_content) + "\n")

    def log_sanitization(self, source: str, before: Dict[str, Any], after: Dict[str, Any]):
        """
        Log a sanitized record, showing the cleaned JSON.

        Args:
            source: Where the record came from
            before: Record passed to strip_invalid
            after: Record returned by strip_invalid
        """
        self.records_sanitized += 1
        timestamp = datetime.now().strftime("%H:%M:%S")
        removed = sorted(set(before) - set(after)) if isinstance(before, dict) and isinstance(after, dict) else []

        self._print(f"[bold yellow][{timestamp}] Sanitized {source}[/bold yellow]")
        if removed:
            self._print(f"  [dim]Removed at root: {', '.join(removed)}[/dim]")
        syntax = Syntax(json.dumps(after, indent=2, ensure_ascii=False), "json", theme="monokai", line_numbers=False)
        self._print(syntax)

        self._write_to_file(f"\n[{timestamp}] SANITIZED {source}\n")
        if removed:
            self._write_to_file(f"Removed at root: {', '.join(removed)}\n")
        self._write_to_file(json.dumps(after, indent=2, ensure_ascii=False) + "\n")
        self._write_to_file("-" * 80 + "\n")

    def log_build(self, vocabulary_path: str, type_count: int, subclass_count: int, outputs: List[str]):
        """
        Log an ontology table build.

        Args:
            vocabulary_path: JSON-LD vocabulary the tables were built from
            type_count: Number of types with declared properties
            subclass_count: Number of subclass links
            outputs: Paths of the written tables
        """
        table = Table(title="Ontology build", box=box.ROUNDED)
        table.add_column("Item", style="cyan")
        table.add_column("Value", style="yellow")
        table.add_row("Vocabulary", str(vocabulary_path))
        table.add_row("Types with properties", str(type_count))
        table.add_row("Subclass links", str(subclass_count))
        for output in outputs:
            table.add_row("Written", str(output))
        self._print(table)

        self._write_to_file(f"\nONTOLOGY BUILD from {vocabulary_path}\n")
        self._write_to_file(f"Types with properties: {type_count}\nSubclass links: {subclass_count}\n")
        for output in outputs:
            self._write_to_file(f"Written: {output}\n")

    def log_error(self, error: str, context: Optional[str] = None):
        """
        Log an error.

        Args:
            error: Error message
            context: Where the error happened
        """
        timestamp = datetime.now().strftime("%H:%M:%S")

        self.console.print(f"[bold red][{timestamp}] ERROR:[/bold red]")
        if context:
            self.console.print(f"[dim]Context: {context}[/dim]")
        self.console.print(Panel(error, border_style="red", box=box.HEAVY))
        self.console.print()

        self._write_to_file(f"\n[{timestamp}] ERROR:\n")
        if context:
            self._write_to_file(f"Context: {context}\n")
        self._write_to_file(f"{error}\n")
        self._write_to_file("-" * 80 + "\n")

    def log_summary(self):
        """Show the session summary and save the HTML export."""
        timestamp = datetime.now().strftime("%H:%M:%S")

        table = Table(title="Session Summary", box=box.DOUBLE_EDGE)
        table.add_column("Metric", style="cyan")
        table.add_column("Count", style="yellow", justify="right")

        table.add_row("Records validated", str(self.records_validated))
        table.add_row("Invalid records", str(self.records_invalid))
        table.add_row("Violations", str(self.violations_total))
        table.add_row("Records sanitized", str(self.records_sanitized))

        self.console.print()
        self.console.print(table)
        self.console.print(f"\n[dim]Log file: {self.log_file}[/dim]")
        if self.html_console is not None:
            self.console.print(f"[dim]HTML file: {self.html_file}[/dim]\n")
            self.html_console.print()
            self.html_console.print(table)

        log_content = []
        log_content.append("\n" + "╔" + "═"*78 + "╗")
        log_content.append("║" + " SESSION SUMMARY".center(78) + "║")
        log_content.append("╠" + "═"*78 + "╣")
        log_content.append("║" + f" Records validated: {self.records_validated}".ljust(78) + "║")
        log_content.append("║" + f" Invalid records: {self.records_invalid}".ljust(78) + "║")
        log_content.append("║" + f" Violations: {self.violations_total}".ljust(78) + "║")
        log_content.append("║" + f" Records sanitized: {self.records_sanitized}".ljust(78) + "║")
        log_content.append("║" + f" Time: {timestamp}".ljust(78) + "║")
        log_content.append("╚" + "═"*78 + "╝\n")
        self._write_to_file("\n".join(log_content))

        self._save_html()

    def _save_html(self):
        """Save the recorded console output as HTML with the Rich colors."""
        from rich.terminal_theme import MONOKAI

        if self.html_console is None:
            return

        try:
            html_output = self.html_console.export_html(
                theme=MONOKAI,
                inline_styles=True,
                clear=False
            )
            with open(self.html_file, 'w', encoding='utf-8') as f:
                f.write(html_output)
        except OSError as e:
            self.console.print(f"[yellow]Warning: Could not save HTML log: {str(e)}[/yellow]")


def setup_logging(level: str = "INFO") -> None:
    """Route the library's standard logging records through Rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


# Global logger instance
_global_logger: Optional[ValidationLogger] = None


def get_logger(log_dir: str = "logs", record_html: bool = True) -> ValidationLogger:
    """
    Get the global logger instance (singleton).

    Args:
        log_dir: Directory for the logs
        record_html: Whether the instance records output for the HTML export

    Returns:
        The logger instance
    """
    global _global_logger
    if _global_logger is None:
        _global_logger = ValidationLogger(log_dir, record_html=record_html)
    return _global_logger
