"""Table Engine configuration module uniformly reads environment variables and provides type-safe access."""

from pathlib import Path

from loguru import logger
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env priority: the current working directory first, followed by the project root directory
PROJECT_ROOT: Path = Path(__file__).resolve().parents[2]
CWD_ENV: Path = Path.cwd() / ".env"
ENV_FILE: str = str(CWD_ENV if CWD_ENV.exists() else (PROJECT_ROOT / ".env"))


class Settings(BaseSettings):
    """Table Engine configuration; every field can be set through a TABLE_ENGINE_ prefixed environment variable."""
    IMAGE_ZOOM: float = Field(2.0, description="Default zoom factor for PNG/PDF screenshots")
    IMAGE_EXPAND: int = Field(5, description="Whitespace pixels added around the cropped table image")
    SCREENSHOT_BACKEND: str = Field(
        "playwright", description="Backend used for image export: playwright (PNG/PDF) or weasyprint (PDF only)"
    )
    SCREENSHOT_BROWSER: str = Field("chromium", description="Browser engine launched by playwright")
    VIEWPORT_WIDTH: int = Field(992, description="Viewport width of the headless browser (pixels)")
    VIEWPORT_HEIGHT: int = Field(744, description="Viewport height of the headless browser (pixels)")
    HTML_BACKGROUND: str = Field("white", description="Body background colour of saved HTML documents")
    OUTPUT_ENCODING: str = Field("utf-8", description="Encoding of HTML, LaTeX and RTF files")
    ATOMIC_WRITES: bool = Field(True, description="Write to a temporary file and rename it into place")
    LOG_LEVEL: str = Field("INFO", description="Log level used by the command line scripts")

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_prefix="TABLE_ENGINE_",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()


def reload_settings() -> Settings:
    """Reload configuration from .env files and environment variables, updating the global settings instance.

    Returns:
        Settings: newly created configuration instance"""
    global settings
    settings = Settings()
    return settings


def print_config(config: Settings):
    """Output the current configuration items to the log in human-readable format to facilitate troubleshooting.

    Parameters:
        config: Settings instance, usually global settings."""
    message = ""
    message += "\n=== Table Engine Configuration ===\n"
    message += f"Image zoom: {config.IMAGE_ZOOM}\n"
    message += f"Image expand: {config.IMAGE_EXPAND}px\n"
    message += f"Screenshot backend: {config.SCREENSHOT_BACKEND} ({config.SCREENSHOT_BROWSER})\n"
    message += f"Viewport: {config.VIEWPORT_WIDTH}x{config.VIEWPORT_HEIGHT}\n"
    message += f"HTML background: {config.HTML_BACKGROUND}\n"
    message += f"Output encoding: {config.OUTPUT_ENCODING}\n"
    message += f"Atomic writes: {config.ATOMIC_WRITES}\n"
    message += f"Log level: {config.LOG_LEVEL}\n"
    message += "==================================\n"
    logger.info(message)
