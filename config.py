"""
Configuration Module for GitAnalyzer

This module provides configuration settings used throughout GitAnalyzer.
It handles loading configuration from INI files and the environment and
creates sample configuration files for first-time users.

Key components:
- Configuration: TypedDict for strongly typed configuration
- DEFAULT_CONFIG: Default values for every setting
- ConfigLoader: INI file loading with per-section processing
- Sample config and .env creation functions
"""

import configparser
import os
from typing import TypedDict, Optional

from console import console, logger


class Configuration(TypedDict):
    """
    TypedDict defining the structure and types of configuration parameters.

    Provides strong typing for configuration settings throughout the application.
    """
    GITHUB_TOKEN: str
    API_BASE_URL: str
    USER_AGENT: str
    CONTRIBUTORS_PER_PAGE: int
    COMMITS_PER_PAGE: int
    REQUEST_TIMEOUT: Optional[float]  # None leaves the transport default in place
    DEFAULT_BRANCH: str  # Used when metadata carries no default branch
    EXPORT_DIR: str
    MAX_WORKERS: int


DEFAULT_CONFIG: Configuration = {
    "GITHUB_TOKEN": "",  # Empty means anonymous access
    "API_BASE_URL": "https://api.github.com",
    "USER_AGENT": "gitanalyzer",
    "CONTRIBUTORS_PER_PAGE": 30,
    "COMMITS_PER_PAGE": 100,
    "REQUEST_TIMEOUT": None,
    "DEFAULT_BRANCH": "main",
    "EXPORT_DIR": "reports",
    "MAX_WORKERS": 2,
}


class ConfigLoader:
    """
    Class responsible for loading configuration from files and handling configuration errors.
    """

    def __init__(self):
        self.logger = logger

    def load(self, config_file: str) -> Configuration:
        """
        Load configuration from a file and return as Configuration dict.

        Args:
            config_file: Path to the configuration file

        Returns:
            Configuration: Dictionary with loaded configuration values
        """
        cp = configparser.ConfigParser()
        try:
            with open(config_file, encoding="utf-8") as f:
                cp.read_file(f)
            config: Configuration = DEFAULT_CONFIG.copy()

            self._process_github_settings(cp, config)
            self._process_api_settings(cp, config)
            self._process_export_settings(cp, config)

            self.logger.info(f"Configuration loaded from {config_file}")
            return config

        except (configparser.Error, OSError, ValueError) as e:
            return self._handle_config_error(config_file, e)

    @staticmethod
    def _process_github_settings(cp: configparser.ConfigParser, config: Configuration) -> None:
        """Process GitHub related settings from config parser"""
        if "github" in cp:
            if "token" in cp["github"]:
                config["GITHUB_TOKEN"] = cp["github"]["token"].strip()
            if "default_branch" in cp["github"]:
                config["DEFAULT_BRANCH"] = cp["github"]["default_branch"].strip()

    @staticmethod
    def _process_api_settings(cp: configparser.ConfigParser, config: Configuration) -> None:
        """Process API request settings from config parser"""
        if "api" in cp:
            section = cp["api"]
            if "base_url" in section:
                config["API_BASE_URL"] = section["base_url"].strip().rstrip("/")
            if "user_agent" in section:
                config["USER_AGENT"] = section["user_agent"].strip()
            if "contributors_per_page" in section:
                config["CONTRIBUTORS_PER_PAGE"] = section.getint("contributors_per_page")
            if "commits_per_page" in section:
                config["COMMITS_PER_PAGE"] = section.getint("commits_per_page")
            if "max_workers" in section:
                config["MAX_WORKERS"] = max(1, section.getint("max_workers"))
            if section.get("request_timeout", "").strip():
                config["REQUEST_TIMEOUT"] = section.getfloat("request_timeout")

    @staticmethod
    def _process_export_settings(cp: configparser.ConfigParser, config: Configuration) -> None:
        """Process export related settings from config parser"""
        if "export" in cp and "export_dir" in cp["export"]:
            config["EXPORT_DIR"] = cp["export"]["export_dir"].strip()

    def _handle_config_error(self, config_file: str, error: Exception) -> Configuration:
        """Handle configuration loading errors"""
        self.logger.error(f"Error loading configuration from {config_file}: {str(error)}")
        self.logger.info("Using default configuration")
        console.print(f"[yellow]Warning:[/yellow] Failed to load config from {config_file}: {error}")
        console.print("[yellow]Using default configuration instead[/yellow]")
        return DEFAULT_CONFIG.copy()


def load_config_from_file(config_file: str) -> Configuration:
    """
    Load configuration from a file and return as Configuration dict.

    Args:
        config_file: Path to the configuration file

    Returns:
        Configuration: Dictionary with loaded configuration values
    """
    config_loader = ConfigLoader()
    return config_loader.load(config_file)


def apply_environment(config: Configuration) -> Configuration:
    """
    Overlay settings taken from environment variables onto a configuration.

    Only non-empty variables override the existing values.
    """
    token = os.environ.get("GITHUB_TOKEN", "").strip()
    if token:
        config["GITHUB_TOKEN"] = token

    export_dir = os.environ.get("GITANALYZER_EXPORT_DIR", "").strip()
    if export_dir:
        config["EXPORT_DIR"] = export_dir

    return config


def create_sample_config() -> None:
    """
    Create a sample configuration file if it doesn't exist.

    Generates a sample INI configuration file with default settings
    as a template for users to customize.
    """
    config_file = 'config.ini.sample'

    if os.path.exists(config_file):
        return

    config = configparser.ConfigParser()
    config['github'] = {
        'token': 'your_github_token_here',
        'default_branch': DEFAULT_CONFIG['DEFAULT_BRANCH'],
    }

    config['api'] = {
        'base_url': DEFAULT_CONFIG['API_BASE_URL'],
        'user_agent': DEFAULT_CONFIG['USER_AGENT'],
        'contributors_per_page': str(DEFAULT_CONFIG['CONTRIBUTORS_PER_PAGE']),
        'commits_per_page': str(DEFAULT_CONFIG['COMMITS_PER_PAGE']),
        'max_workers': str(DEFAULT_CONFIG['MAX_WORKERS']),
        'request_timeout': '',  # Empty keeps the transport default
    }

    config['export'] = {
        'export_dir': DEFAULT_CONFIG['EXPORT_DIR'],
    }

    with open(config_file, 'w', encoding='utf-8') as f:
        config.write(f)

    console.print(f"[green]Created sample configuration file: {config_file}[/green]")
    console.print("[yellow]Rename to config.ini and update with your settings.[/yellow]")


def create_sample_env() -> None:
    """
    Create a sample .env file if it doesn't exist.
    """
    env_file = '.env.sample'

    if os.path.exists(env_file):
        return

    env_content = """# GitHub Authentication (optional, raises the API rate limit)
GITHUB_TOKEN=your_github_token_here

# Where exported reports are written
GITANALYZER_EXPORT_DIR=reports
"""

    with open(env_file, 'w', encoding='utf-8') as f:
        f.write(env_content)

    console.print(f"[green]Created sample environment file: {env_file}[/green]")
    console.print("[yellow]Rename to .env and update with your settings.[/yellow]")
