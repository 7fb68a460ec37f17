# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Declaration and removal surface.

`import_for(ctx, owner, bindings)` installs lexical overrides in the current
block on behalf of `owner`; `unimport_for(ctx, owner, *names)` takes back
overrides that owner installed (all of them when no name is given).

Binding values may be:

- a callable (inline function, lambda, or a reference to an existing one),
- a string naming a function: `"helper"` (current namespace), `"pkg.mod.fn"`,
- a string prefixed with `+` (`"+pkg.mod.fn"`), which loads `pkg.mod` first;
  the `autoload` option does this for every string value.

Subclass `LexicalSubs` to make a pragma of your own; each subclass is a
separate owner, so `MyPragma.unimport(ctx)` only takes back what `MyPragma`
installed:

	class MyPragma(LexicalSubs):
		exports = {"foo": foo, "chomp": my_chomp}

	with ctx.block():
		MyPragma.import_(ctx)
		ctx.call("foo")
"""

from __future__ import annotations

import sys
from typing import Any, Callable, ClassVar, Dict, Mapping, Optional

from lexsubs.config import split_options
from lexsubs.context import OverrideContext
from lexsubs.core.names import qualify, split_qualified
from lexsubs.errors import LexSubsError, ResolutionError
from lexsubs.ledger import RemovalResult
from lexsubs.symtab import Binding

AUTOLOAD_PREFIX = "+"


def resolve_value(
	ctx: OverrideContext,
	value: Any,
	*,
	namespace: str,
	autoload: bool = False,
	owner: str | None = None,
) -> Callable[..., Any]:
	"""Normalize a binding value to a callable, loading its module if asked to."""
	if callable(value):
		return value
	if not isinstance(value, str) or not value.lstrip(AUTOLOAD_PREFIX):
		raise ResolutionError(
			reason_code="not-callable",
			message=f"can't find function: {value!r}",
			owner=owner,
		)

	spec = value
	load = autoload
	if spec.startswith(AUTOLOAD_PREFIX):
		spec = spec[len(AUTOLOAD_PREFIX):]
		load = True
	fqname = qualify(spec, namespace)
	module, local = split_qualified(fqname)

	if load:
		try:
			ctx.load(module)
		except LexSubsError:
			raise
		except Exception as exc:
			raise ResolutionError(
				reason_code="load-failed",
				message=f"can't load {module}: {exc}",
				name=fqname,
				owner=owner,
				module=module,
			) from exc

	target = ctx.table.resolve(fqname)
	if target is None:
		loaded = sys.modules.get(module)
		candidate = getattr(loaded, local, None) if loaded is not None else None
		if callable(candidate):
			target = candidate
	if target is None:
		raise ResolutionError(
			reason_code="unresolved",
			message=f"can't find function: {value!r}",
			name=fqname,
			owner=owner,
			module=module,
		)
	return target


def import_for(
	ctx: OverrideContext,
	owner: str,
	bindings: Mapping[str, Any],
	*,
	debug: Optional[bool] = None,
	autoload: Optional[bool] = None,
) -> Dict[str, Binding]:
	"""
	Install `bindings` as lexical overrides of the current block.

	Every value is resolved before anything is installed: a value that does not
	resolve raises `ResolutionError` and leaves the batch uninstalled.
	"""
	plain, options = split_options(bindings, debug=debug, autoload=autoload)
	namespace = ctx.package
	targets = {
		qualify(name, namespace): resolve_value(
			ctx, value, namespace=namespace, autoload=options.autoload, owner=owner
		)
		for name, value in plain.items()
	}

	# Enter the block's frame even for an empty batch; it anchors the restore.
	ctx.scopes.current_frame()

	if options.debug is not None:
		tracer = ctx.tracer
		old_debug = tracer.enabled
		if options.debug != old_debug:
			tracer.set_debug(options.debug)
			ctx.blocks.on_scope_end(lambda: tracer.set_debug(old_debug))

	return {fqname: ctx.ledger.override(owner, fqname, target) for fqname, target in targets.items()}


def unimport_for(ctx: OverrideContext, owner: str, *names: str) -> RemovalResult:
	"""Remove the named overrides `owner` installed, or all of them."""
	if not names:
		return ctx.ledger.remove_all(owner)
	namespace = ctx.package
	return ctx.ledger.remove_many(owner, [qualify(name, namespace) for name in names])


class LexicalSubs:
	"""Base pragma; the owner identity is the fully-qualified class name."""

	exports: ClassVar[Mapping[str, Any]] = {}

	@classmethod
	def owner(cls) -> str:
		return f"{cls.__module__}.{cls.__qualname__}"

	@classmethod
	def import_(
		cls,
		ctx: OverrideContext,
		bindings: Mapping[str, Any] | None = None,
		**options: Any,
	) -> Dict[str, Binding]:
		return import_for(ctx, cls.owner(), cls.exports if bindings is None else bindings, **options)

	@classmethod
	def unimport(cls, ctx: OverrideContext, *names: str) -> RemovalResult:
		return unimport_for(ctx, cls.owner(), *names)


__all__ = ["LexicalSubs", "import_for", "unimport_for", "resolve_value"]
