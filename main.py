#!/usr/bin/env python3
"""
GitAnalyzer - Main Entry Point

This module provides the command-line entry point for GitAnalyzer. It handles
configuration loading, user input, runs the analysis through the orchestrator
and renders the result in the terminal.

Main features:
- Analysis of any public GitHub repository from a URL or owner/repo
- Language breakdown, top contributors and daily commit activity
- Export of the last result to JSON and contributors CSV
- Optional display of the GitHub API rate limit
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import List, Optional

import dotenv
from github import Auth, Github
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from config import (
    DEFAULT_CONFIG,
    Configuration,
    apply_environment,
    create_sample_config,
    create_sample_env,
    load_config_from_file,
)
from console import (
    RateLimitDisplay,
    configure_logging,
    console,
    logger,
    print_error,
    print_header,
    print_info,
    print_success,
    print_warning,
)
from exceptions import AnalysisError, STAGE_RESOLVE
from exporter import EXPORT_FORMATS, ReportExporter
from models import AnalysisResult, AnalysisSession
from orchestrator import AnalysisOrchestrator

DEFAULT_REPOSITORY = "facebook/react"
TOP_CONTRIBUTORS = 9


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="GitAnalyzer - quick insight into any public GitHub repository")
    parser.add_argument('repository', nargs='?',
                        help='Repository URL or owner/repo (prompted for when omitted)')
    parser.add_argument('--token',
                        help='GitHub personal access token (defaults to GITHUB_TOKEN)')
    parser.add_argument('--export', action='append', choices=sorted(EXPORT_FORMATS), default=[],
                        help='Export the result; may be given more than once')
    parser.add_argument('--output-dir',
                        help='Directory for exported reports (defaults to the configured EXPORT_DIR)')
    parser.add_argument('--config',
                        help='Path to an INI configuration file')
    parser.add_argument('--rate-limit', action='store_true',
                        help='Show the GitHub API rate limit before analyzing')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging to the console')
    return parser.parse_args(argv)


class EnvironmentManager:
    """Manages environment variables and configuration."""

    @staticmethod
    def load_environment(verbose: bool = False) -> None:
        """Load environment variables from .env file if present."""
        env_path = Path('.env')
        if env_path.exists():
            print_info(f"Loading environment variables from {env_path.absolute()}")
            dotenv.load_dotenv(dotenv_path=env_path, override=True)
        elif verbose:
            print_warning("No .env file found in the current directory")

        if verbose and "GITHUB_TOKEN" in os.environ:
            print_info("  GITHUB_TOKEN = [HIDDEN]")

    @staticmethod
    def build_config(config_file: Optional[str]) -> Configuration:
        """Defaults, then the INI file, then the environment"""
        config = DEFAULT_CONFIG.copy()
        if config_file:
            if os.path.exists(config_file):
                config.update(load_config_from_file(config_file))
            else:
                print_warning(f"Config file {config_file} not found, using defaults")
        return apply_environment(config)


def show_rate_limit(token: Optional[str]) -> None:
    """Display the remaining API budget for the given (or anonymous) credential"""
    github = Github(auth=Auth.Token(token)) if token else Github()
    display = RateLimitDisplay()
    if display.update_from_api(github):
        display.display_once()
    github.close()


def render_result(result: AnalysisResult) -> None:
    """Render repository summary, languages, contributors and commit activity"""
    meta = result.metadata
    summary = (
        f"{escape(meta.description or 'No description')}\n\n"
        f"⭐ {meta.stars:,}   🍴 {meta.forks:,}   🧭 {meta.default_branch}   "
        f"📦 {meta.size_mb} MB (approx)"
    )
    console.print(Panel(summary, title=f"[bold]{escape(meta.full_name)}[/bold]", border_style="cyan", padding=(1, 2)))

    print_header("Languages")
    if result.languages:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Language")
        table.add_column("Bytes", justify="right")
        table.add_column("Share", justify="right")
        for entry in result.languages:
            table.add_row(escape(entry.name), f"{entry.bytes:,}", f"{entry.percentage}%")
        console.print(table)
    else:
        print_info("Language data not available.")

    print_header("Top Contributors")
    if result.contributors:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Contributor")
        table.add_column("Contributions", justify="right")
        for contributor in result.contributors[:TOP_CONTRIBUTORS]:
            table.add_row(escape(contributor.identity), f"{contributor.contributions:,}")
        console.print(table)
    else:
        print_info("No contributor data available.")

    print_header("Commit activity (recent)")
    if result.commits:
        peak = max(point.count for point in result.commits)
        table = Table(show_header=True, header_style="bold")
        table.add_column("Day")
        table.add_column("Commits", justify="right")
        table.add_column("")
        for point in result.commits:
            bar = "█" * max(1, round(point.count / peak * 30))
            table.add_row(point.day.isoformat(), str(point.count), f"[magenta]{bar}[/magenta]")
        console.print(table)
    else:
        print_info("No commit data available or repo has very few recent commits.")


def _handle_analysis_error(error: AnalysisError) -> None:
    """
    Render a failed run.

    Args:
        error: Error published by the orchestrator
    """
    if error.stage == STAGE_RESOLVE:
        hints = "Use a URL such as https://github.com/owner/repo or the short form owner/repo."
    elif error.status_code in (401, 403):
        hints = ("The token may be invalid or the rate limit is exhausted.\n"
                 "Authenticated requests get a much higher rate limit.")
    elif error.status_code == 404:
        hints = "The repository does not exist or is private (only public repositories are supported)."
    else:
        hints = "Check your network connection and try again."

    message = f"⚠️ {error.message}\n\n{hints}"
    console.print(Panel(message, title="[bold red]Analysis Failed[/bold red]", border_style="red"))


def export_result(result: AnalysisResult, formats: List[str], output_dir: str) -> List[Path]:
    """Export the result in every requested format and return the written paths"""
    exporter = ReportExporter()
    written = []
    for fmt in dict.fromkeys(formats):
        artifact = exporter.export(result, fmt)
        try:
            path = exporter.save(artifact, output_dir)
        except OSError as e:
            logger.error(f"Could not write {artifact.filename}: {e}")
            print_error(f"Could not save {fmt.upper()} report to {output_dir}: {e.strerror or e}")
            continue
        print_success(f"Saved {fmt.upper()} report to {path}")
        written.append(path)
    return written


async def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for GitAnalyzer.

    Returns:
        Process exit code: 0 on success, 1 when the analysis failed or a
        requested export could not be written
    """
    args = parse_args(argv)

    configure_logging(log_to_console=args.verbose)

    create_sample_config()
    create_sample_env()
    EnvironmentManager.load_environment(verbose=args.verbose)

    config = EnvironmentManager.build_config(args.config)
    token = (args.token or config["GITHUB_TOKEN"] or "").strip() or None

    if args.rate_limit:
        await asyncio.to_thread(show_rate_limit, token)

    repository = args.repository or Prompt.ask(
        "[bold]Repository[/bold] (URL or owner/repo)", default=DEFAULT_REPOSITORY
    )

    session = AnalysisSession(raw_input=repository, credential=token)
    orchestrator = AnalysisOrchestrator(config=config)

    try:
        with console.status(f"[bold green]Analyzing {repository}..."):
            await asyncio.to_thread(orchestrator.run, session)
    finally:
        orchestrator.gateway.close()

    if session.error is not None:
        _handle_analysis_error(session.error)
        return 1

    render_result(session.result)

    if args.export:
        written = export_result(session.result, args.export, args.output_dir or config["EXPORT_DIR"])
        if len(written) < len(set(args.export)):
            return 1

    logger.info(f"Finished analysis of {session.result.ref}")
    return 0


def run() -> None:
    """Console script entry point"""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
