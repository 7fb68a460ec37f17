# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Load-boundary guard.

A separately loaded compilation unit must see the table as it was before any
lexical override, and must not be able to corrupt the overrides of the unit
that loaded it. Around every load the guard:

1) puts every name of the requiring block's frame back to its `undo` snapshot,
   remembers the frame on the pending stack and switches call-site
   interception off,
2) lets the loader run the delegate,
3) pops the frame, puts every name back to the binding it had when the load
   started (its `redo`, plus any facets set since) and restores the
   interception state.

Step 3 runs whether the load succeeded or failed. Loads nest (a loaded unit
may declare overrides and load further units), and the pending stack unwinds in
strict reverse order.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional

from lexsubs.loader import LoadHook
from lexsubs.scope import FRAME_KEY, Frame
from lexsubs.symtab import Snapshot

if TYPE_CHECKING:
	from lexsubs.context import OverrideContext


@dataclass
class PendingLoad:
	frame: Optional[Frame]
	intercepting: bool
	module: str | None = None
	# Table state of every frame name at suspend time.
	live: Dict[str, Snapshot] = field(default_factory=dict)


class LoadBoundaryGuard:
	def __init__(self, ctx: "OverrideContext") -> None:
		self._ctx = ctx
		self._hook: Optional[LoadHook] = None
		self.pending: List[PendingLoad] = []

	@property
	def installed(self) -> bool:
		return self._hook is not None

	def install(self) -> None:
		if self._hook is not None:
			return
		self._hook = self._ctx.loader.add_hook(
			LoadHook(label=FRAME_KEY, before=self._before_load, after=self._after_load)
		)

	def uninstall(self) -> None:
		if self._hook is None:
			return
		self._ctx.loader.remove_hook(self._hook)
		self._hook = None

	def _before_load(self, hints: Mapping[str, Any], module: str) -> None:
		self.suspend(hints.get(FRAME_KEY), module)

	def _after_load(self, hints: Mapping[str, Any], module: str) -> None:
		self.resume()

	def suspend(self, frame: Optional[Frame], module: str | None = None) -> None:
		ctx = self._ctx
		live: Dict[str, Snapshot] = {}
		if frame is not None:
			for name, record in frame.items():
				live[name] = ctx.table.restore(name, record.undo)
				ctx.tracer.transition(FRAME_KEY, "uninstalling", name, live[name], record.undo)
		self.pending.append(
			PendingLoad(frame=frame, intercepting=ctx.intercepting, module=module, live=live)
		)
		ctx.intercepting = False

	def resume(self) -> None:
		ctx = self._ctx
		if not self.pending:
			raise RuntimeError("load boundary resumed without a matching suspend")
		entry = self.pending.pop()
		for name, snapshot in entry.live.items():
			old = ctx.table.restore(name, snapshot)
			ctx.tracer.transition(FRAME_KEY, "installing", name, old, snapshot)
		ctx.intercepting = entry.intercepting

	@contextmanager
	def boundary(self, module: str | None = None) -> Iterator[None]:
		"""
		Explicit load boundary for hosts that run a unit without the loader.

		Uses the frame visible from the current block.
		"""
		self.suspend(self._ctx.scopes.active_frame(), module)
		try:
			yield
		finally:
			self.resume()


__all__ = ["PendingLoad", "LoadBoundaryGuard"]
