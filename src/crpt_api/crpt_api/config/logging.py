# ABOUTME: Loguru configuration for the CRPT API client
# ABOUTME: Builds console and file sinks from LOG_LEVEL, LOG_FORMAT and ENV settings

import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from crpt_api.config._base import BaseCrptSettings
from crpt_api.config.settings import get_settings

TEXT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
PLAIN_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[name]}:{function}:{line} | {message}"


class LoggerConfig(BaseModel):
    """Sink layout for the client's loguru logger."""

    console_enabled: bool = True
    console_level: str = "INFO"
    console_format: str = TEXT_FORMAT
    console_colorize: bool = True
    console_serialize: bool = False
    console_backtrace: bool = True
    console_diagnose: bool = False

    file_enabled: bool = True
    file_level: str = "INFO"
    file_path: Union[str, Path] = "logs/crpt-api.log"
    file_format: str = PLAIN_FORMAT
    file_serialize: bool = False
    file_rotation: str = "100 MB"
    file_retention: str = "30 days"
    file_compression: str = "gz"

    # One JSON object per line, regardless of LOG_FORMAT
    structured_enabled: bool = True
    structured_level: str = "INFO"
    structured_path: Union[str, Path] = "logs/crpt-api-structured.jsonl"

    error_file_enabled: bool = True
    error_file_path: Union[str, Path] = "logs/crpt-api-errors.log"

    enqueue: bool = True
    catch: bool = True


class LoggingSettings(BaseSettings):
    """Sink toggles read from ``CRPT_API_``-prefixed environment variables.

    The level and format come from ``LOG_LEVEL`` / ``LOG_FORMAT`` on
    :class:`BaseCrptSettings`; this class only decides where records go.
    """

    log_file_enabled: bool = Field(default=True)
    log_file_path: str = Field(default="logs/crpt-api.log")
    log_structured_enabled: bool = Field(default=True)
    log_error_file_enabled: bool = Field(default=True)
    log_console_colorize: bool = Field(default=True)

    model_config = SettingsConfigDict(env_prefix="CRPT_API_")


def build_logger_config(
    settings: Optional[BaseCrptSettings] = None,
    logging_settings: Optional[LoggingSettings] = None,
) -> LoggerConfig:
    """
    Derive the sink layout from application settings.

    ``DEBUG=true`` lowers every sink to DEBUG and turns on loguru's variable
    diagnostics. ``LOG_FORMAT=json`` serializes the console and main file
    sinks; ``txt`` keeps the human-readable format.

    Args:
        settings: Application settings. Defaults to :func:`get_settings`.
        logging_settings: Sink toggles. Defaults to the environment.

    Returns:
        The resulting :class:`LoggerConfig`.
    """
    settings = settings or get_settings()
    logging_settings = logging_settings or LoggingSettings()

    level = "DEBUG" if settings.DEBUG else settings.LOG_LEVEL
    as_json = settings.LOG_FORMAT == "json"

    return LoggerConfig(
        console_level=level,
        console_serialize=as_json,
        console_colorize=logging_settings.log_console_colorize and not as_json,
        console_diagnose=settings.DEBUG,
        file_enabled=logging_settings.log_file_enabled,
        file_level=level,
        file_path=logging_settings.log_file_path,
        file_serialize=as_json,
        structured_enabled=logging_settings.log_structured_enabled,
        structured_level=level,
        error_file_enabled=logging_settings.log_error_file_enabled,
    )


def setup_logging(config: Optional[LoggerConfig] = None) -> None:
    """
    Replace every loguru sink with the ones described by ``config``.

    Records emitted without a bound ``name`` fall back to the module name so
    the formats never fail on a missing key.

    Args:
        config: Sink layout. If None, built by :func:`build_logger_config`.
    """
    if config is None:
        config = build_logger_config()

    logger.remove()
    logger.configure(patcher=_default_name)

    if config.console_enabled:
        logger.add(
            sys.stdout,
            level=config.console_level,
            format=config.console_format,
            colorize=config.console_colorize,
            serialize=config.console_serialize,
            backtrace=config.console_backtrace,
            diagnose=config.console_diagnose,
            enqueue=config.enqueue,
            catch=config.catch,
        )

    if config.file_enabled:
        _add_file_sink(config, config.file_path, config.file_level, serialize=config.file_serialize)
    if config.structured_enabled:
        _add_file_sink(config, config.structured_path, config.structured_level, serialize=True)
    if config.error_file_enabled:
        _add_file_sink(config, config.error_file_path, "ERROR", serialize=False)


def _add_file_sink(config: LoggerConfig, path: Union[str, Path], level: str, serialize: bool) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        path,
        level=level,
        format=config.file_format,
        serialize=serialize,
        rotation=config.file_rotation,
        retention=config.file_retention,
        compression=config.file_compression,
        enqueue=config.enqueue,
        catch=config.catch,
    )


def _default_name(record) -> None:
    record["extra"].setdefault("name", record["name"])


def get_logger(name: str):
    """Return the shared logger bound to ``name``."""
    return logger.bind(name=name)


def configure_for_development(settings: Optional[BaseCrptSettings] = None) -> None:
    """Console and main log file only, with tracebacks extended past the catch point."""
    config = build_logger_config(settings).model_copy(
        update={"console_backtrace": True, "structured_enabled": False, "error_file_enabled": False}
    )
    setup_logging(config)


def configure_for_production(settings: Optional[BaseCrptSettings] = None) -> None:
    """Every sink, no colors and no variable values in tracebacks."""
    config = build_logger_config(settings).model_copy(
        update={
            "console_colorize": False,
            "console_backtrace": False,
            "console_diagnose": False,
            "structured_enabled": True,
            "error_file_enabled": True,
        }
    )
    setup_logging(config)


def configure_logging(settings: Optional[BaseCrptSettings] = None) -> None:
    """Apply the preset matching ``settings.ENV``; staging runs the production layout."""
    settings = settings or get_settings()
    if settings.ENV == "development":
        configure_for_development(settings)
    else:
        configure_for_production(settings)
