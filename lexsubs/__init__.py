# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
lexsubs: lexically scoped function overrides.

An override rebinds a named function for the rest of the lexical block that
declares it (and the blocks nested in it). When the block ends the previous
binding comes back; a separately loaded compilation unit never sees the
override at all.

	ctx = OverrideContext()
	ctx.table.define("main.greet", lambda: "hello")

	with ctx.block():
		import_for(ctx, "demo", {"greet": lambda: "hi"})
		ctx.call("greet")    # "hi"

	ctx.call("greet")        # "hello"
"""

from __future__ import annotations

from lexsubs.context import OverrideContext
from lexsubs.errors import LexSubsError, ResolutionError, UnresolvedSymbolError
from lexsubs.ledger import RemovalResult
from lexsubs.pragma import LexicalSubs, import_for, unimport_for
from lexsubs.symtab import Binding, SymbolTable

__all__ = [
	"OverrideContext",
	"SymbolTable",
	"Binding",
	"LexicalSubs",
	"import_for",
	"unimport_for",
	"RemovalResult",
	"LexSubsError",
	"ResolutionError",
	"UnresolvedSymbolError",
]
