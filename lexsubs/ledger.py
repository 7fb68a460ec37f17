# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Override ledger: who installed what, and how to take it back.

Three pieces of state cooperate here:

1) the frame of the current block (see `lexsubs.scope`) records every override
   active in the region so it can be undone around loads and at block exit,
2) the ancestor frame records what the enclosing region expects to see again
   once the block ends,
3) one `OwnerLedger` per owner and block records which bindings that owner
   installed, so `remove` can take back exactly those and nothing that a later
   declaration stacked on top.

Block exit restores in two passes: first every name still in the frame goes
back to the ancestor's view; then every name the ancestor has but the frame
lost (removed mid-block) is reinstated, so a removal never outlives its block.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Set

from lexsubs.core.diagnostics import SHADOW_CONFLICT, UNKNOWN_REMOVAL_TARGET, Diagnostic
from lexsubs.scope import FRAME_KEY, Frame, OverrideRecord
from lexsubs.symtab import Binding, identical

if TYPE_CHECKING:
	from lexsubs.context import OverrideContext


def owner_key(owner: str) -> str:
	"""
	Hints key for an owner's ledger.

	Decorated so it never collides with the frame key, even when the owner is
	named after the frame key itself.
	"""
	return f"{FRAME_KEY}({owner})"


@dataclass
class OwnerLedger:
	owner: str
	# name -> binding this owner installed and still considers its own.
	active: Dict[str, Binding] = field(default_factory=dict)
	# Names taken back by `remove_all` in this block; a repeated `remove_all`
	# reports them again. Not inherited by nested blocks.
	retired: Set[str] = field(default_factory=set)

	def clone(self) -> "OwnerLedger":
		return OwnerLedger(owner=self.owner, active=dict(self.active))

	def record(self, name: str, binding: Binding) -> None:
		self.active[name] = binding
		self.retired.discard(name)

	def retire(self, name: str) -> None:
		self.active.pop(name, None)

	def names(self) -> List[str]:
		return sorted(set(self.active) | self.retired)


@dataclass
class RemovalResult:
	owner: str
	removed: List[str] = field(default_factory=list)
	failed: List[Diagnostic] = field(default_factory=list)

	@property
	def ok(self) -> bool:
		return not self.failed

	@property
	def failed_names(self) -> List[str]:
		return [d.name for d in self.failed if d.name is not None]


class OverrideLedger:
	def __init__(self, ctx: "OverrideContext") -> None:
		self._ctx = ctx

	def owner_ledger(self, owner: str, *, create: bool = True) -> Optional[OwnerLedger]:
		"""
		The ledger of `owner` visible from the current block.

		The first write access in a block clones the inherited ledger, so
		bookkeeping done in a nested block never leaks into its parent.
		"""
		blocks = self._ctx.blocks
		block = blocks.current()
		key = owner_key(owner)
		inherited: Optional[OwnerLedger] = block.hints.get(key)
		if inherited is None and not create:
			return None
		if blocks.new_scope(key):
			ledger = inherited.clone() if inherited is not None else OwnerLedger(owner=owner)
			block.hints[key] = ledger
			return ledger
		return inherited

	def override(self, owner: str, name: str, target: Callable[..., Any]) -> Binding:
		"""Install `target` under the fully-qualified `name` on behalf of `owner`."""
		ctx = self._ctx
		frame = ctx.scopes.current_frame()
		ledger = self.owner_ledger(owner)
		if frame is None or ledger is None:
			raise RuntimeError(f"no override frame open for {owner} in the current block")

		old, new = ctx.table.install(name, target)
		record = frame.get(name)
		if record is not None:
			ctx.tracer.transition(owner, "redefining", name, old, new)
			record.redo = new
		else:
			ctx.tracer.transition(owner, "creating", name, old, new)
			frame.put(OverrideRecord(name=name, undo=old, redo=new))

		ledger.record(name, new)
		return new

	def remove(self, owner: str, name: str) -> RemovalResult:
		return self._remove(owner, [name])

	def remove_many(self, owner: str, names: Iterable[str]) -> RemovalResult:
		return self._remove(owner, list(names))

	def remove_all(self, owner: str) -> RemovalResult:
		ledger = self.owner_ledger(owner, create=False)
		if ledger is None:
			return RemovalResult(owner=owner)
		result = self._remove(owner, ledger.names())
		ledger.retired.update(result.removed)
		return result

	def _remove(self, owner: str, names: List[str]) -> RemovalResult:
		ctx = self._ctx
		result = RemovalResult(owner=owner)
		ledger = self.owner_ledger(owner, create=False)
		frame = ctx.scopes.current_frame(create=False)
		# Work on a copy; the block only switches over once something changed.
		updated = frame.clone() if frame is not None else None

		for name in names:
			installed = ledger.active.get(name) if ledger is not None else None
			if installed is None:
				result.failed.append(
					self._conflict(
						UNKNOWN_REMOVAL_TARGET,
						f"attempt to remove an undefined override: {name}",
						owner,
						name,
					)
				)
				continue
			record = updated.get(name) if updated is not None else None
			if record is None or record.redo is not installed:
				current = record.redo if record is not None else ctx.table.capture(name)
				ctx.tracer.transition(owner, "shadow-conflict", name, installed, current)
				result.failed.append(
					self._conflict(
						SHADOW_CONFLICT,
						f"attempt to remove a shadowed override: {name}",
						owner,
						name,
					)
				)
				continue

			old = ctx.table.restore(name, record.undo)
			ctx.tracer.transition(owner, "unimporting", name, old, record.undo)
			updated.discard(name)
			ledger.retire(name)
			result.removed.append(name)

		if result.removed:
			ctx.blocks.current().hints[FRAME_KEY] = updated
		return result

	def _conflict(self, code: str, message: str, owner: str, name: str) -> Diagnostic:
		diag = Diagnostic(message=message, code=code, phase="ledger", name=name, owner=owner)
		self._ctx.report(diag)
		return diag

	def reconcile(self, frame: Frame, ancestor: Frame) -> None:
		"""Put the table back the way `ancestor` expects it (two passes)."""
		ctx = self._ctx
		table = ctx.table
		tracer = ctx.tracer

		for name, record in frame.items():
			outer = ancestor.get(name)
			if outer is not None:
				if not identical(record.redo, outer.redo):
					tracer.transition(FRAME_KEY, "restoring (overridden)", name, record.redo, outer.redo)
					table.restore(name, outer.redo)
			else:
				tracer.transition(FRAME_KEY, "deleting", name, record.redo, record.undo)
				table.restore(name, record.undo)

		for name, outer in sorted(ancestor.items(), key=lambda item: item[0]):
			if name in frame:
				continue
			tracer.transition(FRAME_KEY, "restoring (unimported)", name, outer.undo, outer.redo)
			table.restore(name, outer.redo)


__all__ = ["OwnerLedger", "RemovalResult", "OverrideLedger", "owner_key"]
