# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Call sites.

A `CallSite` is the compiled form of a call to a named function. While call-site
interception is on (inside a region with lexical overrides, and never inside a
separately loaded unit), compiling a call to an overridden name binds the site
directly to the override, so the call keeps reaching it after the region ends.
Every other site looks its name up in the symbol table at call time.

Unbound names fall back to an `AUTOLOAD` function of the same namespace, which
receives the fully-qualified name as its first argument.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Optional

from lexsubs.core.names import qualify, split_qualified
from lexsubs.errors import UnresolvedSymbolError
from lexsubs.scope import FRAME_KEY, Frame

if TYPE_CHECKING:
	from lexsubs.context import OverrideContext

AUTOLOAD = "AUTOLOAD"


def autoload_name(fqname: str) -> str:
	namespace, _ = split_qualified(fqname)
	return f"{namespace}.{AUTOLOAD}"


class CallSite:
	def __init__(
		self,
		ctx: "OverrideContext",
		name: str,
		target: Optional[Callable[..., Any]] = None,
		autoload: bool = False,
	) -> None:
		self._ctx = ctx
		self.name = name
		# Early-bound target, if any.
		self._target = target
		self._autoload = autoload

	@property
	def early_bound(self) -> bool:
		return self._target is not None

	def __call__(self, *args: Any, **kwargs: Any) -> Any:
		if self._target is not None:
			if self._autoload:
				return self._target(self.name, *args, **kwargs)
			return self._target(*args, **kwargs)
		table = self._ctx.table
		target = table.resolve(self.name)
		if target is not None:
			return target(*args, **kwargs)
		fallback = table.resolve(autoload_name(self.name))
		if fallback is not None:
			return fallback(self.name, *args, **kwargs)
		raise UnresolvedSymbolError(
			reason_code="undefined-function",
			message=f"undefined function {self.name}",
			name=self.name,
		)

	def __repr__(self) -> str:
		how = "early" if self._target is not None else "late"
		return f"CallSite({self.name!r}, {how})"


def compile_call(ctx: "OverrideContext", name: str) -> CallSite:
	block = ctx.blocks.current()
	fqname = qualify(name, block.package)
	if not ctx.intercepting:
		return CallSite(ctx, fqname)
	frame: Optional[Frame] = block.hints.get(FRAME_KEY)
	if frame is None:
		return CallSite(ctx, fqname)

	record = frame.get(fqname)
	if record is not None and record.redo is not None and record.redo.target is not None:
		return CallSite(ctx, fqname, target=record.redo.target)

	if ctx.table.resolve(fqname) is None:
		fallback = frame.get(autoload_name(fqname))
		if fallback is not None and fallback.redo is not None and fallback.redo.target is not None:
			return CallSite(ctx, fqname, target=fallback.redo.target, autoload=True)
	return CallSite(ctx, fqname)


__all__ = ["AUTOLOAD", "CallSite", "compile_call", "autoload_name"]
