"""
SDK configuration: per-call contract options and the compiler endpoint.

- `ContractOptions` is the layered option bag every lifecycle operation works
  with. It is immutable; layering is explicit:

      defaults  <  instance options  <  per-call overrides

  `merged(...)` returns a new object and never touches the one it is called on.
- `CompilerConfig` holds the compiler service URL and HTTP behaviour.

Both load overrides from environment variables (SOPHIA_*) on request; nothing
is read from the environment at import time.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, Optional

from .version import user_agent

_DEFAULT_COMPILER = "http://localhost:3080"

# Minimal gas price accepted by the node, and the default gas limit.
DEFAULT_GAS_PRICE = 1_000_000_000
DEFAULT_GAS = 1_600_000 - 21_000


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None and v != "" else default


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "on")


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


@dataclass(frozen=True)
class ContractOptions:
    # Conversion switches
    skip_args_convert: bool = False
    skip_transform_decoded: bool = False
    # Call mode; `top` pins a static call to a historical block/hash
    call_static: bool = False
    top: Optional[Any] = None
    # Transaction parameters handed to the node collaborator
    deposit: int = 0
    gas_price: int = DEFAULT_GAS_PRICE
    amount: int = 0
    gas: int = DEFAULT_GAS
    wait_mined: bool = True
    verify: bool = False
    # Decoding
    address_prefix: str = "ak"
    # Overrides the instance source passed to collaborators
    source: Optional[str] = None
    # Unknown keys are kept and forwarded to collaborators
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "extra")

    @classmethod
    def from_env(cls, prefix: str = "SOPHIA_") -> "ContractOptions":
        """
        Create options from environment variables:

        SOPHIA_GAS              (int)
        SOPHIA_GAS_PRICE        (int)
        SOPHIA_DEPOSIT          (int)
        SOPHIA_AMOUNT           (int)
        SOPHIA_WAIT_MINED       (bool)
        SOPHIA_ADDRESS_PREFIX   (str)
        """
        base = cls()
        return cls(
            gas=int(_env(f"{prefix}GAS", str(base.gas))),
            gas_price=int(_env(f"{prefix}GAS_PRICE", str(base.gas_price))),
            deposit=int(_env(f"{prefix}DEPOSIT", str(base.deposit))),
            amount=int(_env(f"{prefix}AMOUNT", str(base.amount))),
            wait_mined=_env_bool(f"{prefix}WAIT_MINED", base.wait_mined),
            address_prefix=_env(f"{prefix}ADDRESS_PREFIX", base.address_prefix),
        )

    @classmethod
    def coerce(cls, value: "ContractOptions | Mapping[str, Any] | None") -> "ContractOptions":
        if value is None:
            return cls()
        if isinstance(value, ContractOptions):
            return value
        return cls().merged(value)

    def merged(
        self, overrides: "ContractOptions | Mapping[str, Any] | None" = None, **kw: Any
    ) -> "ContractOptions":
        """
        Shallow merge: keys in `overrides` (then `kw`) win over this object's
        values. Returns a new ContractOptions.

        A ContractOptions override only contributes the fields it sets away
        from their defaults, plus its extra keys.
        """
        if isinstance(overrides, ContractOptions):
            overrides = overrides.explicit()
        incoming: Dict[str, Any] = {**dict(overrides or {}), **kw}
        if not incoming:
            return self
        known = set(self.field_names())
        changes = {k: v for k, v in incoming.items() if k in known}
        extra = dict(self.extra)
        extra.update({k: v for k, v in incoming.items() if k not in known})
        return replace(self, extra=extra, **changes)

    def explicit(self) -> Dict[str, Any]:
        """Fields that differ from the defaults, plus extra keys."""
        base = ContractOptions()
        out = {
            name: getattr(self, name)
            for name in self.field_names()
            if getattr(self, name) != getattr(base, name)
        }
        out.update(self.extra)
        return out

    def to_dict(self) -> Dict[str, Any]:
        """Flat option bag (known fields plus extra keys) for collaborators."""
        out = {name: getattr(self, name) for name in self.field_names()}
        out.update(self.extra)
        return out


@dataclass(slots=True)
class CompilerConfig:
    url: str = field(default_factory=lambda: _DEFAULT_COMPILER)
    timeout: float = 10.0
    max_retries: int = 2
    backoff_factor: float = 0.25
    user_agent: str = field(default_factory=user_agent)

    @classmethod
    def from_env(cls, prefix: str = "SOPHIA_") -> "CompilerConfig":
        """
        Create config from environment variables:

        SOPHIA_COMPILER_URL       (http/https)
        SOPHIA_COMPILER_TIMEOUT   (float seconds)
        SOPHIA_MAX_RETRIES        (int)
        SOPHIA_BACKOFF            (float)
        SOPHIA_USER_AGENT         (str)
        """
        url = _env(f"{prefix}COMPILER_URL", _DEFAULT_COMPILER)
        _ensure_scheme(url, ("http", "https"))
        return cls(
            url=url or _DEFAULT_COMPILER,
            timeout=float(_env(f"{prefix}COMPILER_TIMEOUT", "10.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "2")),
            backoff_factor=float(_env(f"{prefix}BACKOFF", "0.25")),
            user_agent=_env(f"{prefix}USER_AGENT", user_agent()) or user_agent(),
        )

    @classmethod
    def with_overrides(
        cls, base: Optional["CompilerConfig"] = None, **overrides: Any
    ) -> "CompilerConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys and None values are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data and v is not None})
        if "url" in overrides:
            _ensure_scheme(data["url"], ("http", "https"))
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "timeout": float(self.timeout),
            "max_retries": int(self.max_retries),
            "backoff_factor": float(self.backoff_factor),
            "user_agent": self.user_agent,
        }


__all__ = ["ContractOptions", "CompilerConfig", "DEFAULT_GAS", "DEFAULT_GAS_PRICE"]
