# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import pytest

from lexsubs.context import OverrideContext
from lexsubs.errors import ResolutionError
from lexsubs.pragma import LexicalSubs, import_for, resolve_value, unimport_for
from lexsubs.test_support import make_context, named, resolved_label


class GreetingPragma(LexicalSubs):
	exports = {"greet": named("pragma_greet"), "wave": named("pragma_wave")}


class OtherPragma(LexicalSubs):
	exports = {"greet": named("other_greet")}


def test_values_may_be_callables_or_names() -> None:
	def inline() -> str:
		return "inline"

	ctx = make_context({"main.helper": named("helper"), "lib.tool": named("tool")})
	with ctx.block():
		installed = import_for(ctx, "A", {"a": inline, "b": "helper", "c": "lib.tool", "d": len})
		assert sorted(installed) == ["main.a", "main.b", "main.c", "main.d"]
		assert ctx.call("a") == "inline"
		assert ctx.call("b") == "helper"
		assert ctx.call("c") == "tool"
		assert ctx.call("d", [1, 2]) == 2


def test_qualified_keys_override_other_namespaces() -> None:
	ctx = make_context({"My.foo": named("orig")})
	with ctx.block():
		import_for(ctx, "A", {"My.foo": named("lexical")})
		assert resolved_label(ctx, "My.foo") == "lexical"
	assert resolved_label(ctx, "My.foo") == "orig"


def test_unresolvable_value_aborts_the_whole_batch() -> None:
	ctx = make_context({"main.foo": named("orig")})
	with ctx.block():
		with pytest.raises(ResolutionError) as excinfo:
			import_for(ctx, "A", {"foo": named("f1"), "bar": "nothing_here"})
		assert excinfo.value.reason_code == "unresolved"
		assert excinfo.value.name == "main.nothing_here"
		assert resolved_label(ctx, "main.foo") == "orig"
		assert "main.bar" not in ctx.table


def test_non_callable_value_is_rejected() -> None:
	ctx = make_context()
	with pytest.raises(ResolutionError) as excinfo:
		resolve_value(ctx, 42, namespace="main")
	assert excinfo.value.reason_code == "not-callable"
	with pytest.raises(ResolutionError):
		resolve_value(ctx, "+", namespace="main")


def test_plus_prefix_loads_the_module_first() -> None:
	seen: list[str | None] = []

	def helpers(ctx: OverrideContext) -> None:
		seen.append(resolved_label(ctx, "main.foo"))
		ctx.table.define("Helpers.shout", lambda text: text.upper())

	ctx = make_context({"main.foo": named("orig")}, units={"Helpers": helpers})
	with ctx.block():
		import_for(ctx, "A", {"foo": named("f1")})
		with ctx.block():
			import_for(ctx, "A", {"shout": "+Helpers.shout"})
			assert ctx.call("shout", "hi") == "HI"
	# The load ran behind the load boundary.
	assert seen == ["orig"]


def test_autoload_option_loads_every_named_value() -> None:
	loaded: list[str] = []

	def unit(name: str):
		def run(ctx: OverrideContext) -> None:
			loaded.append(name)
			ctx.table.define(f"{name}.fn", named(f"{name}_fn"))

		return run

	ctx = make_context(units={"M1": unit("M1"), "M2": unit("M2")})
	with ctx.block():
		import_for(ctx, "A", {"one": "M1.fn", "two": "M2.fn", "-autoload": True})
		assert ctx.call("one") == "M1_fn"
		assert ctx.call("two") == "M2_fn"
	assert loaded == ["M1", "M2"]


def test_autoload_failure_is_a_resolution_error() -> None:
	ctx = make_context()
	with pytest.raises(ResolutionError) as excinfo:
		import_for(ctx, "A", {"foo": "+Missing.fn"})
	assert excinfo.value.reason_code == "load-failed"
	assert excinfo.value.module == "Missing"
	assert isinstance(excinfo.value.__cause__, ImportError)


def test_real_python_module_functions_resolve() -> None:
	with OverrideContext() as ctx:
		with ctx.block():
			import_for(ctx, "A", {"dumps": "+json.dumps"})
			assert ctx.call("dumps", {"a": 1}) == '{"a": 1}'
		assert "main.dumps" not in ctx.table


def test_pragma_subclasses_are_separate_owners() -> None:
	ctx = make_context()
	with ctx.block():
		GreetingPragma.import_(ctx)
		OtherPragma.import_(ctx)
		assert ctx.call("greet") == "other_greet"

		result = GreetingPragma.unimport(ctx)
		assert result.removed == ["main.wave"]
		assert result.failed_names == ["main.greet"]

		assert OtherPragma.unimport(ctx, "greet").ok
		assert "main.greet" not in ctx.table


def test_pragma_owner_identity() -> None:
	assert GreetingPragma.owner().endswith("test_pragma.GreetingPragma")
	assert LexicalSubs.owner() == "lexsubs.pragma.LexicalSubs"


def test_import_for_with_explicit_owner_pairs_with_unimport_for() -> None:
	ctx = make_context()
	with ctx.block():
		GreetingPragma.import_(ctx, {"extra": named("extra")})
		result = unimport_for(ctx, GreetingPragma.owner(), "extra")
		assert result.ok
		assert "main.extra" not in ctx.table


def test_debug_option_is_lexically_scoped() -> None:
	ctx = make_context()
	assert not ctx.tracer.enabled
	with ctx.block():
		import_for(ctx, "A", {"foo": named("f1")}, debug=True)
		assert ctx.tracer.enabled
		with ctx.block():
			import_for(ctx, "A", {"-debug": False})
			assert not ctx.tracer.enabled
		assert ctx.tracer.enabled
	assert not ctx.tracer.enabled


def test_unknown_option_is_rejected_before_installing() -> None:
	ctx = make_context()
	with pytest.raises(ValueError):
		import_for(ctx, "A", {"foo": named("f1"), "-bogus": 1})
	assert "main.foo" not in ctx.table
