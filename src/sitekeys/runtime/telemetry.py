"""Structured logging for the keybinding compiler, backed by telelog.

The rest of the package only touches four names:

``configure(...)`` -- adopt an explicit telelog config or the environment's
``get_logger(name)`` -- cached telelog logger for a component
``record_event(name, ...)`` -- one structured line per compiler event
``span(name, ...)`` -- profile a block and report exceptions escaping it
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, Tuple, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "SITEKEYS_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "sitekeys")

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None
# logger name -> context values currently pushed by open spans
_PUSHED_CONTEXT: Dict[str, Dict[str, str]] = {}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return repr(value)
    return str(value)


def _pairs(data: Dict[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def _build_env_config() -> Any:
    config = tl.Config()
    config.with_min_level((_env("LOG_LEVEL") or "INFO").upper())

    console = not _env_flag("DISABLE_CONSOLE", False)
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _env_flag("NO_COLOR", False))

    if _env_flag("LOG_JSON", False):
        config.with_json_format(True)

    log_file = _env("LOG_FILE")
    if log_file:
        config.with_file_output(log_file)

    if _env_flag("LOG_BUFFERED", False):
        config.with_buffering(True)
        config.with_buffer_size(int(_env("LOG_BUFFER_SIZE") or "2048"))
    return config


def configure(*, config: Optional[Any] = None) -> None:
    """Swap the active telelog configuration and drop cached loggers.

    Without ``config`` the ``SITEKEYS_*`` environment decides.
    """

    global _ACTIVE_CONFIG
    if config is None:
        config = _build_env_config()

    config.with_profiling(True)
    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()
    _PUSHED_CONTEXT.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached telelog logger for ``name``."""

    if _ACTIVE_CONFIG is None:
        configure()
    logger_name = name or DEFAULT_LOGGER_NAME
    logger = _LOGGER_CACHE.get(logger_name)
    if logger is None:
        logger = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
        _LOGGER_CACHE[logger_name] = logger
    return logger


def _level_method(logger: Any, level: Any) -> Tuple[Any, bool]:
    name = str(level).lower()
    structured = getattr(logger, f"{name}_with", None)
    if structured is not None:
        return structured, True
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _emit(logger: Any, level: Any, message: str, payload: Dict[str, Any]) -> None:
    method, structured = _level_method(logger, level)
    if structured:
        method(message, _pairs(payload))
    else:
        method(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str | Any = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit ``event::<name>`` with ``data`` attached as key/value pairs."""

    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Lets the body of a ``span`` attach metadata or flag a failure."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload["reason"] = reason
        _emit(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block under ``name``.

    ``metadata`` is pushed as logger context for the duration of the block;
    values an enclosing span set for the same keys are restored on exit.
    When ``component`` is ``True`` the span name doubles as the component id.
    Exceptions are reported through ``SpanHandle.fail`` and re-raised.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None

    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    pushed = _PUSHED_CONTEXT.setdefault(logger_name or DEFAULT_LOGGER_NAME, {})
    shadowed = {key: pushed[key] for key in context if key in pushed}
    for key, value in context.items():
        log.add_context(key, value)
        pushed[key] = value

    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        handle = SpanHandle(
            logger=log,
            span_name=name,
            component_name=component_name,
            metadata=dict(context),
        )
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            for key in context:
                if key in shadowed:
                    log.add_context(key, shadowed[key])
                    pushed[key] = shadowed[key]
                else:
                    log.remove_context(key)
                    pushed.pop(key, None)


__all__ = [
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]
