from __future__ import annotations
from typing import Any, Dict, Iterable, Optional
import copy, os, json

import yaml

DEFAULT_ENV_PREFIX = "BATTLE_CALC__"

DEFAULTS: Dict[str, Any] = {
    "catalog": {"path": None},
    "optimiser": {"max_attackers": 8},
    "server": {"host": "127.0.0.1", "port": 8000, "reload": False},
    "logging": {"level": "INFO"},
}


class ConfigError(ValueError):
    """Raised when configuration cannot be read or holds invalid values."""


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out

def _load_one(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    # YAML is a superset of JSON; keep the JSON parser for files YAML rejects.
    try:
        d = yaml.safe_load(text)
    except yaml.YAMLError:
        try:
            d = json.loads(text)
        except ValueError as exc:
            raise ConfigError(f"Config file {path} is neither YAML nor JSON") from exc
    if d is None:
        return {}
    if not isinstance(d, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return d

def load_configs(paths: Iterable[str] | None) -> Dict[str, Any]:
    cfg: Dict[str, Any] = {}
    for p in (paths or []):
        cfg = _deep_merge(cfg, _load_one(p))
    return cfg

def env_overrides(prefix: str = DEFAULT_ENV_PREFIX) -> Dict[str, Any]:
    # Nested via double underscores: BATTLE_CALC__OPTIMISER__MAX_ATTACKERS=6
    out: Dict[str, Any] = {}
    for k, v in os.environ.items():
        if not k.startswith(prefix):
            continue
        parts = k[len(prefix):].split("__")
        cur = out
        for i, part in enumerate(parts):
            key = part.lower()
            if i == len(parts) - 1:
                cur[key] = _coerce(v)
            else:
                cur = cur.setdefault(key, {})
    return out

def _coerce(s: str) -> Any:
    t = s.strip().lower()
    if t in ("true", "false"):
        return t == "true"
    if t in ("none", "null"):
        return None
    try:
        if "." in t:
            return float(t)
        return int(t)
    except ValueError:
        return s

def apply_cli_overrides(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    return _deep_merge(base, overrides or {})

def load_settings(
    paths: Iterable[str] | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Defaults, then config files, then environment, then explicit overrides."""
    cfg = copy.deepcopy(DEFAULTS)
    cfg = _deep_merge(cfg, load_configs(paths))
    cfg = _deep_merge(cfg, env_overrides(env_prefix))
    cfg = apply_cli_overrides(cfg, overrides or {})
    _validate(cfg)
    return cfg

def _validate(cfg: Dict[str, Any]) -> None:
    limit = (cfg.get("optimiser") or {}).get("max_attackers")
    # bool is an int subclass; reject it explicitly
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 1):
        raise ConfigError(f"optimiser.max_attackers must be a positive integer or null, got {limit!r}")
    port = (cfg.get("server") or {}).get("port")
    if isinstance(port, bool) or not isinstance(port, int):
        raise ConfigError(f"server.port must be an integer, got {port!r}")

def settings_to_env(cfg: Dict[str, Any], prefix: str = DEFAULT_ENV_PREFIX) -> Dict[str, str]:
    """Flatten settings into environment variables that env_overrides reads back."""
    out: Dict[str, str] = {}
    def walk(node: Dict[str, Any], parts: list) -> None:
        for k, v in node.items():
            if isinstance(v, dict):
                walk(v, parts + [k])
                continue
            if isinstance(v, bool):
                text = "true" if v else "false"
            elif v is None:
                text = "null"
            else:
                text = str(v)
            out[prefix + "__".join(p.upper() for p in parts + [k])] = text
    walk(cfg, [])
    return out

__all__ = [
    "DEFAULTS",
    "ConfigError",
    "load_configs",
    "load_settings",
    "env_overrides",
    "apply_cli_overrides",
    "settings_to_env",
    "_deep_merge",
]
