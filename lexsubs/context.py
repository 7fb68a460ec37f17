# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
The override context: all process-wide state of the engine in one object.

Nothing in `lexsubs` keeps module-level mutable state; every component reaches
the table, the block stack, the tracer, the loader and its siblings through
the context it was built with. Tests build a fresh context per case.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional

from lexsubs.blocks import BlockStack, LexicalBlock
from lexsubs.core.diagnostics import Diagnostic
from lexsubs.core.names import DEFAULT_NAMESPACE
from lexsubs.dispatch import CallSite, compile_call
from lexsubs.ledger import OverrideLedger
from lexsubs.load_guard import LoadBoundaryGuard
from lexsubs.loader import ModuleLoader
from lexsubs.scope import Frame, ScopeStackManager
from lexsubs.symtab import SymbolTable
from lexsubs.trace import Tracer


class OverrideContext:
	def __init__(
		self,
		table: SymbolTable | None = None,
		*,
		delegate: Callable[[str], Any] | None = None,
		debug: bool | None = None,
		package: str = DEFAULT_NAMESPACE,
	) -> None:
		self.table = table if table is not None else SymbolTable()
		self.blocks = BlockStack(package)
		self.tracer = Tracer(debug)
		self.loader = ModuleLoader(self.blocks, delegate)
		self.diagnostics: List[Diagnostic] = []
		# True while call sites compiled in the current unit bind to overrides.
		self.intercepting = False
		self.scopes = ScopeStackManager(self)
		self.ledger = OverrideLedger(self)
		self.guard = LoadBoundaryGuard(self)
		self.closed = False

	def __enter__(self) -> "OverrideContext":
		return self

	def __exit__(self, *exc: Any) -> None:
		self.close()

	@contextmanager
	def block(self, package: str | None = None) -> Iterator[LexicalBlock]:
		with self.blocks.block(package) as blk:
			yield blk

	def set_package(self, package: str) -> None:
		self.blocks.set_package(package)

	@property
	def package(self) -> str:
		return self.blocks.current().package

	def active_frame(self) -> Optional[Frame]:
		return self.scopes.active_frame()

	def call_site(self, name: str) -> CallSite:
		return compile_call(self, name)

	def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
		return self.call_site(name)(*args, **kwargs)

	def load(self, module: str) -> Any:
		return self.loader.load(module)

	def report(self, diag: Diagnostic) -> None:
		self.diagnostics.append(diag)
		logger = logging.getLogger(f"lexsubs.{diag.phase}" if diag.phase else "lexsubs")
		level = logging.WARNING if diag.severity in ("warning", "error") else logging.INFO
		logger.log(level, "%s", diag.format_human())

	def close(self) -> None:
		"""Close every open block (running its restores) and drop the load guard."""
		if self.closed:
			return
		self.closed = True
		self.blocks.close_all()
		self.guard.uninstall()


__all__ = ["OverrideContext"]
