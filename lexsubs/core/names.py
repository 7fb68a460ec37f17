# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Name qualification helpers.

Every binding in the symbol table is keyed by a fully-qualified name of the form
`namespace.local`. Declarations and call sites use local names, which are
qualified against the namespace of the block that is currently compiling.
"""

from __future__ import annotations

from typing import Tuple

DEFAULT_NAMESPACE = "main"
SEP = "."


def qualify(name: str, namespace: str | None = None) -> str:
	"""
	Return the fully-qualified form of `name`.

	- `"foo"` in namespace `"pkg"` -> `"pkg.foo"`
	- `"other.foo"` is already qualified and returned unchanged
	- `".foo"` is shorthand for the default namespace (`"main.foo"`)
	"""
	if not name:
		raise ValueError("empty symbol name")
	if name.startswith(SEP):
		return f"{DEFAULT_NAMESPACE}{name}"
	if SEP in name:
		return name
	return f"{namespace or DEFAULT_NAMESPACE}{SEP}{name}"


def split_qualified(fqname: str) -> Tuple[str, str]:
	"""Split a fully-qualified name into (namespace, local name)."""
	namespace, sep, local = fqname.rpartition(SEP)
	if not sep:
		return DEFAULT_NAMESPACE, fqname
	return namespace, local


def module_of(fqname: str) -> str:
	return split_qualified(fqname)[0]


__all__ = ["DEFAULT_NAMESPACE", "qualify", "split_qualified", "module_of"]
