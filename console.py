"""
Console and Logging Interface Module

This module provides a centralized interface for console output, printing,
and logging throughout GitAnalyzer. It configures and exports:
- Rich console for formatted terminal output
- Rich logger for structured logging
- Rate limit display for the GitHub API
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Custom theme with consistent color scheme
CONSOLE_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "highlight": "magenta",
    "heading": "bold blue",
    "subheading": "bold cyan",
    "rate_limit.low": "red",
    "rate_limit.medium": "yellow",
    "rate_limit.good": "green",
})

LOGGER_NAME = "gitanalyzer"

# Initialize Rich console with theme
console = Console(theme=CONSOLE_THEME, highlight=True)


# Log file configuration
def get_log_filename() -> str:
    """Generate a timestamped log filename"""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"gitanalyzer_{timestamp}.log"


# Configure logging with Rich
def configure_logging(
        log_file: Optional[str] = None,
        log_level: int = logging.INFO,
        log_to_console: bool = True,
        log_to_file: bool = True,
) -> logging.Logger:
    """
    Configure and return the application logger with Rich formatting

    Args:
        log_file: Path to log file (if None, a default timestamped file under logs/ is used)
        log_level: Logging level (default: INFO)
        log_to_console: Whether to output logs to console
        log_to_file: Whether to output logs to a file

    Returns:
        Configured logger instance
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Configure console handler with Rich
    if log_to_console:
        console_handler = RichHandler(
            console=console,
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
        console_handler.setLevel(log_level)
        root_logger.addHandler(console_handler)

    # Configure file handler
    if log_to_file:
        if log_file is None:
            log_dir = Path("logs")
            log_dir.mkdir(exist_ok=True)
            log_path = log_dir / get_log_filename()
        else:
            log_path = Path(log_file)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        ))
        file_handler.setLevel(log_level)
        root_logger.addHandler(file_handler)

    # Return module-specific logger
    return logging.getLogger(LOGGER_NAME)


# The CLI reconfigures logging (file output, verbosity) once arguments are parsed
logger = logging.getLogger(LOGGER_NAME)


# Helper functions for formatted output
def print_header(text: str, style: str = "heading") -> None:
    """Print a formatted header text"""
    console.print(f"\n[{style}]{text}[/{style}]")


def print_info(text: str) -> None:
    """Print info text"""
    console.print(f"[info]ℹ️ {text}[/info]")


def print_success(text: str) -> None:
    """Print success text"""
    console.print(f"[success]✅ {text}[/success]")


def print_warning(text: str) -> None:
    """Print warning text"""
    console.print(f"[warning]⚠️ {text}[/warning]")


def print_error(text: str) -> None:
    """Print error text"""
    console.print(f"[error]❌ {text}[/error]")


class RateLimitDisplay:
    """Display GitHub API rate limit information"""

    def __init__(self, console: Console = console):
        self.console = console
        self.rate_data = {
            "limit": 0,
            "remaining": 0,
            "reset_time": None,
        }

    def update_from_api(self, github_client: Any) -> bool:
        """
        Update rate limit data from a PyGithub client.

        Returns:
            True when fresh data was retrieved, False otherwise
        """
        try:
            rate_limit = github_client.get_rate_limit()
        except Exception as e:
            logger.warning(f"Could not update rate limit data: {e}")
            return False

        # PyGithub 2.x exposes the core bucket under resources
        core = getattr(rate_limit, "resources", rate_limit).core
        self.rate_data["limit"] = core.limit
        self.rate_data["remaining"] = core.remaining
        self.rate_data["reset_time"] = core.reset
        return True

    def _get_status_style(self) -> str:
        """Get color style based on remaining requests"""
        remaining = self.rate_data["remaining"]
        limit = self.rate_data["limit"]

        if remaining < limit * 0.2:
            return "rate_limit.low"
        elif remaining < limit * 0.5:
            return "rate_limit.medium"
        return "rate_limit.good"

    def display_once(self) -> None:
        """Display current rate limit status"""
        if not self.rate_data.get("limit"):
            self.console.print("[warning]No rate limit data available yet[/warning]")
            return

        style = self._get_status_style()
        reset_str = self.rate_data["reset_time"] or "Unknown"

        self.console.print(
            f"[{style}]API Requests: "
            f"{self.rate_data['remaining']}/{self.rate_data['limit']} remaining "
            f"(resets at {reset_str})[/{style}]"
        )


# Export main interfaces
__all__ = [
    'console',
    'logger',
    'print_header',
    'print_info',
    'print_success',
    'print_warning',
    'print_error',
    'RateLimitDisplay',
    'configure_logging'
]
