"""
settings.py

Application configuration management for precabal.

Features:
- Centralized application configuration using Pydantic settings
- Rich consoles shared by the command line front end

Usage:
Import appsettings for application configuration values.
"""

from typing import Final
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from rich.console import Console

# Console instances for rich output
console: Final[Console] = Console()
errconsole: Final[Console] = Console(stderr=True)


class App(BaseSettings):
    """
    Application settings model.

    Settings can be overridden through environment variables with the
    PRECABAL_ prefix.

    Attributes:
        beQuiet: Suppress debug logging output
        recursion_limit: Maximum depth of the inclusion stack
        bounds_filename: Bindings file looked up next to the input file
        input_suffix: Input suffix from which the output name is derived
    """

    beQuiet: bool = True

    recursion_limit: int = Field(default=32, ge=1)

    bounds_filename: str = "package-bounds.txt"
    input_suffix: str = ".cabal.in"

    model_config = SettingsConfigDict(
        env_prefix="PRECABAL_",  # Environment variables with this prefix override settings
        case_sensitive=False,  # Allow case-insensitive environment variables
        extra="allow",  # Allow additional attributes not defined in the model
    )


# Create the application settings instance
appsettings: Final[App] = App()
