# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration options and environment defaults.

Declarations accept two options next to their bindings:

- `debug`: switch transition tracing on/off for the rest of the block
  (`None` leaves the current setting alone),
- `autoload`: load the module of every string-named value before resolving it
  (a per-value `+` prefix does the same for a single value).

`LEXSUBS_DEBUG` in the environment sets the tracer's initial state.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Tuple

DEBUG_ENV_VAR = "LEXSUBS_DEBUG"
_TRUTHY = {"1", "true", "yes", "on"}

# Option keys accepted inline in a bindings mapping, e.g. {"foo": f, "-debug": True}.
OPTION_PREFIX = "-"


@dataclass(frozen=True)
class OverrideOptions:
	debug: Optional[bool] = None
	autoload: bool = False


def debug_from_env(environ: Mapping[str, str] | None = None) -> bool:
	env = os.environ if environ is None else environ
	return env.get(DEBUG_ENV_VAR, "").strip().lower() in _TRUTHY


def split_options(
	bindings: Mapping[str, Any],
	*,
	debug: Optional[bool] = None,
	autoload: Optional[bool] = None,
) -> Tuple[dict[str, Any], OverrideOptions]:
	"""
	Separate inline `-option` keys from real bindings.

	Keyword arguments win over inline options.
	"""
	plain: dict[str, Any] = {}
	inline: dict[str, Any] = {}
	for key, value in bindings.items():
		if key.startswith(OPTION_PREFIX):
			inline[key[len(OPTION_PREFIX):]] = value
		else:
			plain[key] = value
	unknown = set(inline) - {"debug", "autoload"}
	if unknown:
		raise ValueError(f"unknown option(s): {', '.join(sorted(OPTION_PREFIX + k for k in unknown))}")
	if debug is None and "debug" in inline and inline["debug"] is not None:
		debug = bool(inline["debug"])
	if autoload is None:
		autoload = bool(inline.get("autoload", False))
	return plain, OverrideOptions(debug=debug, autoload=autoload)


__all__ = ["DEBUG_ENV_VAR", "OverrideOptions", "debug_from_env", "split_options"]
