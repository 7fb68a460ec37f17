# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Module loader: the host's compilation-unit loading collaborator.

The loader itself takes no part in path resolution, caching, or dependency
ordering; it hands the module name to a delegate (`importlib.import_module` by
default) and runs the delegate inside a fresh compilation unit.

Interested parties register `LoadHook` records. Hooks form a singly linked
chain, newest first, which `load` walks: every `before` hook runs (with the
hints of the requiring block) ahead of the delegate, and every hook whose
`before` ran gets its `after` call, in reverse order, however the load ends.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Mapping, Optional

from lexsubs.blocks import BlockStack

log = logging.getLogger("lexsubs.loader")

HookFn = Callable[[Mapping[str, Any], str], None]


@dataclass(eq=False)
class LoadHook:
	label: str
	before: HookFn
	after: HookFn
	next: Optional["LoadHook"] = None


class ModuleLoader:
	def __init__(
		self,
		blocks: BlockStack | None = None,
		delegate: Callable[[str], Any] | None = None,
	) -> None:
		self._blocks = blocks
		self._delegate = delegate or importlib.import_module
		self._head: Optional[LoadHook] = None
		# Names of the modules currently being loaded, outermost first.
		self.loading: List[str] = []

	def hooks(self) -> Iterator[LoadHook]:
		hook = self._head
		while hook is not None:
			yield hook
			hook = hook.next

	def add_hook(self, hook: LoadHook) -> LoadHook:
		hook.next = self._head
		self._head = hook
		return hook

	def remove_hook(self, hook: LoadHook) -> None:
		prev: Optional[LoadHook] = None
		cur = self._head
		while cur is not None:
			if cur is hook:
				if prev is None:
					self._head = cur.next
				else:
					prev.next = cur.next
				cur.next = None
				return
			prev, cur = cur, cur.next
		raise ValueError(f"load hook not registered: {hook.label}")

	def load(self, module: str) -> Any:
		if not module:
			raise ValueError("empty module name")
		hints: Mapping[str, Any] = self._blocks.current().hints if self._blocks is not None else {}
		# Hooks added while the load is in flight do not get an `after` call.
		chain = list(self.hooks())
		ran: List[LoadHook] = []
		log.debug("loading %s (hooks: %s)", module, [h.label for h in chain])
		try:
			for hook in chain:
				hook.before(hints, module)
				ran.append(hook)
			self.loading.append(module)
			try:
				if self._blocks is None:
					return self._delegate(module)
				with self._blocks.unit(package=module):
					return self._delegate(module)
			finally:
				self.loading.pop()
		finally:
			for hook in reversed(ran):
				hook.after(hints, module)


__all__ = ["LoadHook", "ModuleLoader"]
