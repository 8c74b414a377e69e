# SPDX-License-Identifier: LGPL-3.0-or-later
# hyperbake/core/exceptions.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional


def _safe_int(x: Any, default: int = 1) -> int:
    try:
        return int(x)
    except (TypeError, ValueError):
        return default


def _clamp_exit_code(code: int) -> int:
    # Exit codes are 0..255.
    if code < 0:
        return 1
    if code > 255:
        return 255
    return code


def _one_line(s: str, limit: int = 600) -> str:
    s = (s or "").strip().replace("\r", " ").replace("\n", " ")
    s = " ".join(s.split())
    return s if len(s) <= limit else (s[: limit - 3] + "...")


_SECRET_KEY_PARTS = (
    "pass",
    "password",
    "passwd",
    "secret",
    "token",
    "apikey",
    "api_key",
    "auth",
    "private",
)


def _is_secret_key(k: str) -> bool:
    ks = (k or "").lower()
    return any(p in ks for p in _SECRET_KEY_PARTS)


def _redact(ctx: Dict[str, Any]) -> Dict[str, Any]:
    return {k: ("<redacted>" if _is_secret_key(str(k)) else v) for k, v in ctx.items()}


def _format_context_compact(ctx: Dict[str, Any]) -> str:
    # Stable order, redaction, single-line.
    red = _redact(ctx)
    return ", ".join(f"{k}={red[k]!r}" for k in sorted(red.keys()))


@dataclass(eq=False)
class HyperbakeError(Exception):
    """
    Base project error with:
      - stable fields for reporting/JSON
      - readable __str__ (what users see)
      - safe code handling
    """
    code: int = 1
    msg: str = "error"
    cause: Optional[BaseException] = None
    context: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        self.code = _clamp_exit_code(_safe_int(self.code, default=1))
        self.msg = _one_line(self.msg) or self.__class__.__name__
        if self.context is None:
            self.context = {}
        super().__init__(self.msg)
        self.args = (self.msg,)

    def with_context(self, **ctx: Any) -> "HyperbakeError":
        self.context.update(ctx)
        return self

    def user_message(self, *, include_context: bool = False, include_cause: bool = False) -> str:
        """
        Human-friendly message for logs.
        """
        parts = [self.msg or self.__class__.__name__]

        if include_context and self.context:
            parts.append(f"[{_one_line(_format_context_compact(self.context))}]")

        if include_cause and self.cause is not None:
            parts.append(f"(cause: {type(self.cause).__name__}: {_one_line(str(self.cause))})")

        return " ".join(parts)

    def __str__(self) -> str:
        return self.user_message(include_context=False, include_cause=False)

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "type": self.__class__.__name__,
            "code": self.code,
            "message": self.msg,
            "context": _redact(self.context or {}),
        }
        if include_cause and self.cause is not None:
            d["cause"] = {"type": type(self.cause).__name__, "message": _one_line(str(self.cause))}
        return d


class ConfigError(HyperbakeError):
    """A single configuration problem, optionally tied to one option."""

    @classmethod
    def for_option(cls, option: str, msg: str, cause: Optional[BaseException] = None) -> "ConfigError":
        return cls(code=2, msg=msg, cause=cause, context={"option": option})

    @property
    def option(self) -> Optional[str]:
        return (self.context or {}).get("option")


class DecodeError(ConfigError):
    """Raw settings could not be mapped onto the typed config."""


class InvalidValueError(ConfigError):
    """Value present but malformed or out of range."""


class MissingValueError(ConfigError):
    """Required value is empty."""


class ResourceError(ConfigError):
    """Referenced file or URL is missing or unreachable."""


class PrivateKeyNotFoundError(ResourceError):
    pass


class PrivateKeyInvalidError(ResourceError):
    pass


class MultiError(HyperbakeError):
    """
    Aggregate of every error found in one validation pass.

    Nested MultiErrors are flattened so callers always see a flat list.
    """

    def __init__(self, errors: Iterable[BaseException], msg: Optional[str] = None) -> None:
        self.errors: List[BaseException] = []
        for e in errors:
            if isinstance(e, MultiError):
                self.errors.extend(e.errors)
            else:
                self.errors.append(e)
        n = len(self.errors)
        super().__init__(code=2, msg=msg or f"{n} error(s) occurred")

    def __str__(self) -> str:
        lines = [f"{self.msg}:", ""]
        lines += [f"* {e}" for e in self.errors]
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.errors)

    def of_type(self, kind: type) -> List[BaseException]:
        return [e for e in self.errors if isinstance(e, kind)]

    def to_dict(self, *, include_cause: bool = False) -> Dict[str, Any]:
        d = super().to_dict(include_cause=include_cause)
        d["errors"] = [
            e.to_dict(include_cause=include_cause) if isinstance(e, HyperbakeError) else {"type": type(e).__name__, "message": str(e)}
            for e in self.errors
        ]
        return d


def format_exception_for_cli(e: BaseException, *, verbose: int = 0) -> str:
    """
    One-liner output; a MultiError gets one bullet line per error.

    verbose=0: just message
    verbose=1: message + compact context (if any)
    verbose>=2: message + context + cause
    """
    if isinstance(e, MultiError):
        head = e.user_message(include_context=(verbose >= 1))
        lines = [f"{head}:", ""]
        lines += [f"* {format_exception_for_cli(sub, verbose=verbose)}" for sub in e.errors]
        return "\n".join(lines)
    if isinstance(e, HyperbakeError):
        return e.user_message(
            include_context=(verbose >= 1),
            include_cause=(verbose >= 2),
        )
    if verbose >= 2:
        return f"{type(e).__name__}: {_one_line(str(e))}"
    return _one_line(str(e)) or type(e).__name__
