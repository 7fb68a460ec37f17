# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Scope frames and the scope stack manager.

A `Frame` holds the overrides active in one lexical block, keyed by
fully-qualified name. Each `OverrideRecord` keeps two snapshots:

- `undo`: the binding the name had before the first override in the current
  chain (None when the name was absent). It is captured once and copied
  unchanged into every nested frame, so it always denotes the un-overridden
  state, which is what a load boundary must expose.
- `redo`: the binding currently installed by the innermost override.

Frames live in the block hints under `FRAME_KEY`. The first declaration in a
block clones the inherited (ancestor) frame; the clone is consulted and
mutated for the rest of the block, and on block exit the manager reconciles
the table back to the ancestor's view.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple

from lexsubs.blocks import LexicalBlock
from lexsubs.core.diagnostics import REENTRANCY_UNDERFLOW, Diagnostic
from lexsubs.symtab import Snapshot

if TYPE_CHECKING:
	from lexsubs.context import OverrideContext

FRAME_KEY = "lexsubs"


@dataclass
class OverrideRecord:
	name: str
	undo: Snapshot
	redo: Snapshot

	def copy(self) -> "OverrideRecord":
		return OverrideRecord(name=self.name, undo=self.undo, redo=self.redo)


class Frame:
	"""Overrides active in one lexical region; at most one record per name."""

	def __init__(self, records: Dict[str, OverrideRecord] | None = None) -> None:
		self._records: Dict[str, OverrideRecord] = dict(records or {})

	def clone(self) -> "Frame":
		"""Copy the records (never the snapshots they point at)."""
		return Frame({name: rec.copy() for name, rec in self._records.items()})

	def __contains__(self, name: str) -> bool:
		return name in self._records

	def __iter__(self) -> Iterator[str]:
		return iter(list(self._records))

	def __len__(self) -> int:
		return len(self._records)

	def get(self, name: str) -> Optional[OverrideRecord]:
		return self._records.get(name)

	def put(self, record: OverrideRecord) -> None:
		self._records[record.name] = record

	def discard(self, name: str) -> Optional[OverrideRecord]:
		return self._records.pop(name, None)

	def items(self) -> list[Tuple[str, OverrideRecord]]:
		return list(self._records.items())

	def names(self) -> list[str]:
		return sorted(self._records)

	def __repr__(self) -> str:
		return f"Frame({self.names()!r})"


class ScopeStackManager:
	"""
	Keeps frames in lockstep with lexical blocks.

	`depth` counts entered-but-not-left frames across all compilation units. The
	load-boundary guard is installed when it goes 0 -> 1 and removed when it
	goes back to 0, so one guard serves every nested declaration.
	"""

	def __init__(self, ctx: "OverrideContext") -> None:
		self._ctx = ctx
		self.depth = 0

	def active_frame(self) -> Optional[Frame]:
		"""The frame visible from the current block (own or inherited)."""
		return self._ctx.blocks.current().hints.get(FRAME_KEY)

	def current_frame(self, *, create: bool = True) -> Optional[Frame]:
		"""
		The frame owned by the current block, entering one if this is the first
		use of the block.

		With `create=False` no frame is started when nothing is inherited: there
		is nothing to work on.
		"""
		blocks = self._ctx.blocks
		block = blocks.current()
		if not create and block.hints.get(FRAME_KEY) is None:
			return None
		if blocks.new_scope(FRAME_KEY):
			return self.enter(block)
		return block.hints[FRAME_KEY]

	def enter(self, block: LexicalBlock) -> Frame:
		ctx = self._ctx
		ancestor: Optional[Frame] = block.hints.get(FRAME_KEY)
		frame = ancestor.clone() if ancestor is not None else Frame()
		block.hints[FRAME_KEY] = frame

		self.depth += 1
		if self.depth == 1:
			ctx.guard.install()

		# A frame with nothing to inherit starts a new activation: call sites
		# compiled from here on bind to lexical overrides.
		top_level = ancestor is None
		saved_intercepting = ctx.intercepting
		if top_level:
			ctx.intercepting = True

		def _on_exit() -> None:
			current = block.hints.get(FRAME_KEY)
			self.leave(current if current is not None else Frame(), ancestor)
			if top_level:
				ctx.intercepting = saved_intercepting

		ctx.blocks.on_scope_end(_on_exit)
		return frame

	def leave(self, frame: Frame, ancestor: Optional[Frame]) -> None:
		ctx = self._ctx
		ctx.ledger.reconcile(frame, ancestor if ancestor is not None else Frame())
		if self.depth <= 0:
			ctx.report(
				Diagnostic(
					message="scope exit without a matching scope entry",
					code=REENTRANCY_UNDERFLOW,
					phase="scope",
					severity="warning",
				)
			)
			self.depth = 0
			return
		self.depth -= 1
		if self.depth == 0:
			ctx.guard.uninstall()


__all__ = ["FRAME_KEY", "OverrideRecord", "Frame", "ScopeStackManager"]
