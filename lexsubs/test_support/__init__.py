# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Shared helpers for tests that drive the override engine.

These keep test bodies focused on scope behaviour: building a context with a
pre-populated table, naming functions so assertion failures are readable, and
a scripted loader delegate whose "modules" are plain Python callables.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping

from lexsubs.context import OverrideContext
from lexsubs.symtab import SymbolTable


def named(label: str, result: Any = None) -> Callable[..., Any]:
	"""Return a distinct function returning `result` (defaults to `label`)."""
	value = label if result is None else result

	def fn(*args: Any, **kwargs: Any) -> Any:
		return value

	fn.__name__ = label
	fn.__qualname__ = label
	return fn


def make_context(
	functions: Mapping[str, Callable[..., Any]] | None = None,
	*,
	units: Mapping[str, Callable[[OverrideContext], Any]] | None = None,
	debug: bool = False,
) -> OverrideContext:
	"""
	Build a context whose table starts with `functions` and whose loader runs
	`units[module](ctx)` instead of importing real modules.
	"""
	holder: Dict[str, OverrideContext] = {}
	scripted = dict(units or {})

	def delegate(module: str) -> Any:
		if module not in scripted:
			raise ImportError(f"no module named {module!r}")
		return scripted[module](holder["ctx"])

	ctx = OverrideContext(SymbolTable(functions), delegate=delegate, debug=debug)
	holder["ctx"] = ctx
	return ctx


def resolved_label(ctx: OverrideContext, name: str) -> str | None:
	"""`__name__` of whatever `name` is bound to right now (None when unbound)."""
	target = ctx.table.resolve(name)
	return getattr(target, "__name__", None) if target is not None else None


def codes(ctx: OverrideContext) -> List[str | None]:
	return [d.code for d in ctx.diagnostics]


__all__ = ["named", "make_context", "resolved_label", "codes"]
