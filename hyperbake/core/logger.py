# SPDX-License-Identifier: LGPL-3.0-or-later
from __future__ import annotations

import datetime as _dt
import json
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from termcolor import colored as _colored

# ---------------------------------------------------------------------------
# TRACE level (additive)
# ---------------------------------------------------------------------------

TRACE = 5
if not hasattr(logging, "TRACE"):
    logging.TRACE = TRACE  # type: ignore[attr-defined]
    logging.addLevelName(TRACE, "TRACE")


def _logger_trace(self: logging.Logger, msg: str, *args, **kwargs) -> None:
    if self.isEnabledFor(TRACE):
        self._log(TRACE, msg, args, **kwargs)


if not hasattr(logging.Logger, "trace"):
    logging.Logger.trace = _logger_trace  # type: ignore[attr-defined]

_LEVEL_EMOJI = {
    "TRACE": "🧬",
    "DEBUG": "🔍",
    "INFO": "✅",
    "WARNING": "⚠️",
    "ERROR": "💥",
    "CRITICAL": "🧨",
}
_LEVEL_COLOR = {
    "TRACE": "cyan",
    "DEBUG": "blue",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red",
}


def _is_tty(stream=None) -> bool:
    try:
        return (stream or sys.stderr).isatty()
    except (AttributeError, ValueError):
        return False


def _supports_unicode() -> bool:
    """
    If the stream encoding can't handle emoji, degrade gracefully.
    """
    enc = getattr(sys.stderr, "encoding", None) or "utf-8"
    try:
        "✅".encode(enc)
        return True
    except (UnicodeEncodeError, LookupError):
        return False


def c(text: str, color: Optional[str] = None, attrs: Optional[List[str]] = None, *, enable: bool = True) -> str:
    """Colorize text when enabled."""
    if not enable or not color:
        return text
    return _colored(text, color=color, attrs=attrs or [])


# ---------------------------------------------------------------------------
# Context helpers
# ---------------------------------------------------------------------------

Ctx = Mapping[str, Any]


def _safe_str(v: Any, *, max_len: int = 240) -> str:
    s = str(v).replace("\n", "\\n").replace("\r", "\\r")
    if len(s) > max_len:
        s = s[: max_len - 1] + "…"
    return s


def _merge_ctx(base: Optional[Ctx], extra: Optional[Ctx]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if base:
        out.update(dict(base))
    if extra:
        out.update(dict(extra))
    return out


def _format_ctx_kv(ctx: Optional[Ctx]) -> str:
    if not ctx:
        return ""
    items = sorted(ctx.items(), key=lambda kv: str(kv[0]))
    parts = [f"{_safe_str(k, max_len=80)}={_safe_str(v)}" for k, v in items]
    return " " + " ".join(parts) if parts else ""


class ContextLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that carries a persistent context dict.
    Call sites can also pass `extra={"ctx": {...}}` which merges on top.

    Usage:
      log = Log.bind(logger, builder="qemu", build="centos")
      log.info("Preparing")
      log.error("Failed", extra={"ctx": {"errors": 2}})
    """

    def __init__(self, logger: logging.Logger, ctx: Optional[Ctx] = None):
        super().__init__(logger, extra={"ctx": dict(ctx or {})})

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> Tuple[Any, Dict[str, Any]]:
        extra = kwargs.get("extra") or {}
        extra["ctx"] = _merge_ctx(self.extra.get("ctx"), extra.get("ctx"))
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **ctx: Any) -> "ContextLoggerAdapter":
        return ContextLoggerAdapter(self.logger, _merge_ctx(self.extra.get("ctx"), ctx))


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LogStyle:
    color: bool = True
    show_ms: bool = False
    show_src: bool = False  # module:line
    show_pid: bool = False
    show_logger: bool = False
    utc: bool = False
    align_level: int = 8
    unicode: bool = True


class EmojiFormatter(logging.Formatter):
    def __init__(self, style: LogStyle):
        super().__init__()
        self._style = style

    def _now(self, created: float) -> str:
        dt = (
            _dt.datetime.fromtimestamp(created, tz=_dt.timezone.utc)
            if self._style.utc
            else _dt.datetime.fromtimestamp(created)
        )
        return dt.strftime("%H:%M:%S.%f")[:-3] if self._style.show_ms else dt.strftime("%H:%M:%S")

    def _emoji(self, levelname: str) -> str:
        if not self._style.unicode:
            return "·"
        return _LEVEL_EMOJI.get(levelname, "•")

    def _prefix_bits(self, record: logging.LogRecord) -> str:
        bits: List[str] = []
        if self._style.show_pid:
            bits.append(f"pid={os.getpid()}")
        if self._style.show_logger:
            bits.append(record.name)
        if self._style.show_src:
            bits.append(f"{record.module}:{record.lineno}")
        return (" [" + " ".join(bits) + "]") if bits else ""

    def format(self, record: logging.LogRecord) -> str:
        ts = self._now(record.created)
        emoji = self._emoji(record.levelname)
        color_ok = bool(self._style.color and _is_tty())

        lvl = c(record.levelname, _LEVEL_COLOR.get(record.levelname), enable=color_ok)
        msg = record.getMessage()
        if record.levelno >= logging.WARNING:
            msg = c(msg, _LEVEL_COLOR.get(record.levelname), attrs=["bold"], enable=color_ok)

        ctx_s = _format_ctx_kv(getattr(record, "ctx", None))
        line = f"{ts} {emoji} {lvl:<{self._style.align_level}}{self._prefix_bits(record)} {msg}{ctx_s}"
        if record.exc_info:
            line += "\n" + "\n".join("  " + ln for ln in self.formatException(record.exc_info).splitlines())
        return line


class JsonFormatter(logging.Formatter):
    """
    NDJSON formatter (one JSON object per line), good for CI/log shipping.
    """

    def __init__(self, *, utc: bool = True, include_src: bool = True):
        super().__init__()
        self._utc = bool(utc)
        self._include_src = bool(include_src)

    def _iso(self, created: float) -> str:
        tz = _dt.timezone.utc if self._utc else None
        return _dt.datetime.fromtimestamp(created, tz=tz).isoformat(timespec="milliseconds")

    def format(self, record: logging.LogRecord) -> str:
        obj: Dict[str, Any] = {
            "ts": self._iso(record.created),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "pid": os.getpid(),
        }
        if self._include_src:
            obj.update({"module": record.module, "lineno": record.lineno})

        ctx = getattr(record, "ctx", None)
        if ctx:
            obj["ctx"] = {str(k): _safe_str(v) for k, v in dict(ctx).items()}

        if record.exc_info:
            et = record.exc_info[0]
            obj["exc_type"] = et.__name__ if et else "Exception"
            obj["traceback"] = self.formatException(record.exc_info)

        return json.dumps(obj, ensure_ascii=False, default=str)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

class Log:
    @staticmethod
    def _level_from_flags(verbose: int, quiet: int) -> int:
        """
          quiet=0: default INFO
          -q: WARNING
          -qq: ERROR
          -vv: DEBUG
          -vvv: TRACE
        Quiet wins over verbose if both are set.
        """
        if quiet >= 2:
            return logging.ERROR
        if quiet == 1:
            return logging.WARNING
        if verbose >= 3:
            return TRACE
        if verbose >= 2:
            return logging.DEBUG
        return logging.INFO

    @staticmethod
    def bind(logger: logging.Logger, **ctx: Any) -> ContextLoggerAdapter:
        """Return a LoggerAdapter that carries a persistent context dict."""
        return ContextLoggerAdapter(logger, ctx)

    @staticmethod
    def step(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("➡️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def ok(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.info("✅ %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def warn(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.warning("⚠️  %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def fail(logger: logging.Logger, msg: str, **ctx: Any) -> None:
        logger.error("💥 %s", msg, extra={"ctx": ctx} if ctx else None)

    @staticmethod
    def trace(logger: logging.Logger, msg: str, *args: Any, **ctx: Any) -> None:
        if ctx:
            logger.log(TRACE, msg, *args, extra={"ctx": ctx})
        else:
            logger.log(TRACE, msg, *args)

    @staticmethod
    def setup(
        verbose: int = 0,
        log_file: Optional[str] = None,
        *,
        quiet: int = 0,
        color: bool = True,
        utc: bool = False,
        show_logger: bool = False,
        logger_name: str = "hyperbake",
        json_logs: bool = False,
    ) -> logging.Logger:
        """
        Configure and return the project's logger.

        json_logs=True emits NDJSON on stderr.
        """
        logger = logging.getLogger(logger_name)
        logger.propagate = False

        level = Log._level_from_flags(verbose, quiet)
        logger.setLevel(level)

        style = LogStyle(
            color=bool(color),
            show_ms=verbose >= 3,
            show_src=verbose >= 3,
            show_pid=verbose >= 2,
            show_logger=bool(show_logger),
            utc=bool(utc),
            unicode=_supports_unicode(),
        )

        for h in list(logger.handlers):
            logger.removeHandler(h)
            h.close()

        sh = logging.StreamHandler(stream=sys.stderr)
        sh.setLevel(level)
        sh.setFormatter(JsonFormatter(utc=utc) if json_logs else EmojiFormatter(style))
        logger.addHandler(sh)

        if log_file:
            fp = Path(log_file).expanduser().resolve()
            fp.parent.mkdir(parents=True, exist_ok=True)
            if json_logs:
                fh_fmt: logging.Formatter = JsonFormatter(utc=utc)
            else:
                fh_fmt = EmojiFormatter(
                    LogStyle(color=False, show_ms=True, show_src=True, show_pid=True, show_logger=True, utc=utc, unicode=style.unicode)
                )
            fh = logging.FileHandler(fp, encoding="utf-8")
            fh.setLevel(level)
            fh.setFormatter(fh_fmt)
            logger.addHandler(fh)

        logger.debug("Logger initialized (level=%s)", logging.getLevelName(level))
        return logger
