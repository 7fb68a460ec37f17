# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Lexical blocks of the host program.

The override engine needs three things from the host's notion of a lexical
region, all of which live here:

- per-block hints: a key/value map a nested block inherits (as a shallow copy)
  from its parent when it opens, and which never leaks back out,
- "is this a new scope for key K?" detection, so the first declaration in a
  block creates state and later declarations in the same block augment it,
- end-of-scope callbacks, run in registration order when the block closes.

A compilation unit (a loaded module) starts with a fresh root block and empty
hints: lexical state never crosses a unit boundary.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, List, Optional, Set

from lexsubs.core.names import DEFAULT_NAMESPACE


@dataclass
class LexicalBlock:
	hints: Dict[str, Any]
	package: str = DEFAULT_NAMESPACE
	parent: Optional["LexicalBlock"] = None
	# Nesting depth of compilation units; 0 is the main unit.
	unit: int = 0
	closed: bool = False
	_claimed: Set[str] = field(default_factory=set)
	_on_exit: List[Callable[[], None]] = field(default_factory=list)

	@property
	def is_unit_root(self) -> bool:
		return self.parent is None or self.parent.unit != self.unit


class BlockStack:
	"""Stack of open lexical blocks across all active compilation units."""

	def __init__(self, package: str = DEFAULT_NAMESPACE) -> None:
		self._stack: List[LexicalBlock] = [LexicalBlock(hints={}, package=package)]

	def current(self) -> LexicalBlock:
		if not self._stack:
			raise RuntimeError("no open lexical block")
		return self._stack[-1]

	@property
	def depth(self) -> int:
		return len(self._stack)

	def open(self, package: str | None = None) -> LexicalBlock:
		parent = self.current()
		block = LexicalBlock(
			hints=dict(parent.hints),
			package=package or parent.package,
			parent=parent,
			unit=parent.unit,
		)
		self._stack.append(block)
		return block

	def close(self, block: LexicalBlock | None = None) -> None:
		"""
		Close the innermost block (which must be `block` when given) and run its
		end-of-scope callbacks in registration order.
		"""
		top = self.current()
		if block is not None and block is not top:
			raise RuntimeError("lexical blocks must be closed innermost first")
		self._stack.pop()
		top.closed = True
		callbacks, top._on_exit = top._on_exit, []
		for callback in callbacks:
			callback()

	def close_all(self) -> None:
		while self._stack:
			self.close()

	@contextmanager
	def block(self, package: str | None = None) -> Iterator[LexicalBlock]:
		blk = self.open(package)
		try:
			yield blk
		finally:
			self.close(blk)

	@contextmanager
	def unit(self, package: str = DEFAULT_NAMESPACE) -> Iterator[LexicalBlock]:
		"""
		Run a nested compilation unit: a fresh root block with empty hints.

		Any block the unit leaves open is closed when the unit ends, innermost
		first, the way the end of a file ends every scope in it.
		"""
		parent = self._stack[-1] if self._stack else None
		root = LexicalBlock(
			hints={},
			package=package,
			parent=parent,
			unit=(parent.unit + 1) if parent is not None else 0,
		)
		base = len(self._stack)
		self._stack.append(root)
		try:
			yield root
		finally:
			while len(self._stack) > base:
				self.close()

	def set_package(self, package: str) -> None:
		self.current().package = package

	def new_scope(self, key: str) -> bool:
		"""
		True the first time `key` is claimed in the current block.

		Later calls in the same block return False, so state stored under `key`
		in the hints is augmented rather than recreated.
		"""
		block = self.current()
		if key in block._claimed:
			return False
		block._claimed.add(key)
		return True

	def on_scope_end(self, callback: Callable[[], None]) -> None:
		self.current()._on_exit.append(callback)


__all__ = ["LexicalBlock", "BlockStack"]
