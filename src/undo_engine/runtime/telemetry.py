"""Logging and profiling for the undo engine, on top of telelog.

Callers use ``record_event`` for one-off structured lines and ``span`` to
time a command. Both go through loggers from ``get_logger``, which share one
telelog config. The config comes from ``UNDO_ENGINE_*`` variables unless
``configure`` is given a preset name or an explicit config.
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, List, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "UNDO_ENGINE_"
_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class TelemetrySettings:
    """Knobs translated onto a ``telelog.Config`` by ``build_config``."""

    min_level: str = "INFO"
    console: bool = True
    colored: bool = True
    json: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: int = 2048
    profiling: bool = True

    @classmethod
    def from_env(cls) -> "TelemetrySettings":
        return cls(
            min_level=(env("LOG_LEVEL") or "INFO").upper(),
            console=not env_flag("DISABLE_CONSOLE", False),
            colored=not env_flag("NO_COLOR", False),
            json=env_flag("LOG_JSON", False),
            log_file=env("LOG_FILE") or "",
            buffered=env_flag("LOG_BUFFERED", False),
            buffer_size=int(env("LOG_BUFFER_SIZE") or "2048"),
            profiling=env_flag("PROFILE", True),
        )


PRESETS: Dict[str, TelemetrySettings] = {
    "development": TelemetrySettings(min_level="DEBUG"),
    "production": TelemetrySettings(
        console=False, log_file="undo_engine.log", buffered=True
    ),
    "performance": TelemetrySettings(
        min_level="DEBUG",
        console=False,
        json=True,
        log_file="undo_engine-performance.log",
        buffered=True,
    ),
}
PRESETS["performance_analysis"] = PRESETS["performance"]


def build_config(settings: TelemetrySettings) -> Any:
    config = tl.Config()
    config.with_min_level(settings.min_level)
    config.with_console_output(settings.console)
    if settings.console:
        config.with_colored_output(settings.colored)
    if settings.json:
        config.with_json_format(True)
    if settings.log_file:
        config.with_file_output(settings.log_file)
    if settings.buffered:
        config.with_buffering(True)
        config.with_buffer_size(settings.buffer_size)
    config.with_profiling(settings.profiling)
    return config


def preset_settings(preset: str) -> TelemetrySettings:
    try:
        settings = PRESETS[preset.lower()]
    except KeyError:
        raise ValueError(f"Unknown preset '{preset}'.") from None
    # an explicit log file still wins over the preset's default
    overrides: Dict[str, Any] = {"profiling": env_flag("PROFILE", True)}
    if settings.log_file and env("LOG_FILE"):
        overrides["log_file"] = env("LOG_FILE")
    return replace(settings, **overrides)


_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the shared telelog config and drop cached loggers.

    ``config`` is adopted as-is; ``preset`` names one of ``PRESETS``. With
    neither, settings are read from the environment again.
    """

    global _config
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        config = build_config(preset_settings(preset))
    elif config is None:
        config = build_config(TelemetrySettings.from_env())
    _config = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    logger_name = name or env("LOGGER") or "undo_engine"
    logger = _loggers.get(logger_name)
    if logger is None:
        if _config is None:
            configure()
        logger = _loggers[logger_name] = tl.Logger.with_config(logger_name, _config)
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _pairs(payload: Dict[str, Any]) -> List[Tuple[str, str]]:
    return [(str(key), _text(value)) for key, value in payload.items()]


def _emit(logger: Any, level: Any, message: str, payload: Dict[str, Any]) -> None:
    """Log ``message`` with structured pairs when the logger supports it."""

    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, _pairs(payload))
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str | Any = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit an ``event::<name>`` line carrying ``data``."""

    _emit(
        get_logger(logger_name),
        level,
        f"event::{name}",
        {"event": name, **(data or {})},
    )


@dataclass
class SpanHandle:
    """Yielded by ``span``; collects metadata and the block's outcome."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)
    outcome: str = "ok"

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def _report(self, level: str, message: str, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        _emit(self.logger, level, message, payload)

    def fail(self, reason: str) -> None:
        self.outcome = "failed"
        self._report("error", "span::fail", reason)

    def reject(self, reason: str) -> None:
        """Mark a refused command; nothing was applied but nothing broke."""

        self.outcome = "rejected"
        self._report("warning", "span::reject", reason)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block under ``name``.

    ``component=True`` tracks the block as a component called ``name``; a
    string picks the component name. ``metadata`` is attached as logger
    context while the block runs.
    """

    logger = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=logger,
        span_name=name,
        component_name=component_name,
        metadata=dict(context),
    )

    with ExitStack() as stack:
        for key, value in context.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component_name:
            stack.enter_context(logger.track_component(component_name))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "TelemetrySettings",
    "build_config",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "record_event",
    "span",
]
