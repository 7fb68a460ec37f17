# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Symbol table adapter: the process-wide name -> binding table.

A name carries a small record of independent facets: one callable slot (the
only facet overrides ever touch) plus any number of data facets that merely
share the name. Overrides never mutate a `Binding`; installing a callable builds
a fresh record that carries the other facets over, so a captured `Binding`
is a complete, immutable snapshot of the name and can be put back verbatim.

`None` is the snapshot of an absent name.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Tuple


def _frozen(facets: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
	return MappingProxyType(dict(facets or {}))


@dataclass(frozen=True, eq=False)
class Binding:
	"""
	Immutable record of everything bound to one name.

	Compared by identity: two captures are the same snapshot only if they are the
	same object.
	"""

	name: str
	target: Optional[Callable[..., Any]] = None
	facets: Mapping[str, Any] = field(default_factory=_frozen)

	def with_target(self, target: Optional[Callable[..., Any]]) -> "Binding":
		return replace(self, target=target)

	def with_facet(self, facet: str, value: Any) -> "Binding":
		facets = dict(self.facets)
		facets[facet] = value
		return replace(self, facets=_frozen(facets))

	def without_facet(self, facet: str) -> "Binding":
		facets = dict(self.facets)
		facets.pop(facet, None)
		return replace(self, facets=_frozen(facets))

	@property
	def is_empty(self) -> bool:
		return self.target is None and not self.facets


Snapshot = Optional[Binding]


def binding_id(snapshot: Snapshot) -> str:
	"""Hex identity of a snapshot for trace output; `0x0` for an absent name."""
	return "0x%x" % (id(snapshot) if snapshot is not None else 0)


def identical(a: Snapshot, b: Snapshot) -> bool:
	"""Identity comparison of the callable facet of two snapshots."""
	a_target = a.target if a is not None else None
	b_target = b.target if b is not None else None
	return a_target is b_target


class SymbolTable:
	"""
	Name -> Binding table consulted by call sites.

	All writes are single dict operations; there is no partially-installed state
	to observe between `capture`, `install` and `restore`.
	"""

	def __init__(self, initial: Mapping[str, Callable[..., Any]] | None = None) -> None:
		self._bindings: Dict[str, Binding] = {}
		for name, target in (initial or {}).items():
			self.define(name, target)

	def __contains__(self, name: str) -> bool:
		return name in self._bindings

	def __iter__(self) -> Iterator[str]:
		return iter(sorted(self._bindings))

	def __len__(self) -> int:
		return len(self._bindings)

	def names(self) -> list[str]:
		return sorted(self._bindings)

	def state(self) -> Dict[str, Binding]:
		"""Shallow copy of the whole table, for before/after comparisons."""
		return dict(self._bindings)

	def capture(self, name: str) -> Snapshot:
		return self._bindings.get(name)

	def install(self, name: str, target: Callable[..., Any]) -> Tuple[Snapshot, Binding]:
		"""
		Swap `target` into the callable slot of `name`.

		Returns `(old, new)`: the complete prior snapshot (None when the name was
		absent) and the freshly installed binding, which carries over every other
		facet of the old one.
		"""
		old = self._bindings.get(name)
		if old is None:
			new = Binding(name=name, target=target)
		else:
			new = old.with_target(target)
		self._bindings[name] = new
		return old, new

	def restore(self, name: str, snapshot: Snapshot) -> Snapshot:
		"""Reinstall `snapshot` verbatim (or delete the name); returns what was replaced."""
		old = self._bindings.pop(name, None)
		if snapshot is not None:
			self._bindings[name] = snapshot
		return old

	# Host-side helpers. These are ordinary (non-lexical) definitions.

	def define(self, name: str, target: Callable[..., Any]) -> Binding:
		return self.install(name, target)[1]

	def undefine(self, name: str) -> Snapshot:
		"""Drop the callable slot of `name`, keeping its data facets."""
		old = self._bindings.get(name)
		if old is None:
			return None
		new = old.with_target(None)
		if new.is_empty:
			del self._bindings[name]
		else:
			self._bindings[name] = new
		return old

	def set_facet(self, name: str, facet: str, value: Any) -> Binding:
		old = self._bindings.get(name)
		new = (old or Binding(name=name)).with_facet(facet, value)
		self._bindings[name] = new
		return new

	def facet(self, name: str, facet: str, default: Any = None) -> Any:
		binding = self._bindings.get(name)
		if binding is None:
			return default
		return binding.facets.get(facet, default)

	def resolve(self, name: str) -> Optional[Callable[..., Any]]:
		binding = self._bindings.get(name)
		return binding.target if binding is not None else None


__all__ = ["Binding", "Snapshot", "SymbolTable", "binding_id", "identical"]
