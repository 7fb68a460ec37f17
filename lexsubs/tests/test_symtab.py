# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from lexsubs.symtab import SymbolTable, binding_id, identical
from lexsubs.test_support import named


def test_install_returns_prior_snapshot_and_keeps_facets() -> None:
	table = SymbolTable()
	table.define("main.foo", named("orig"))
	table.set_facet("main.foo", "value", 42)
	before = table.capture("main.foo")

	old, new = table.install("main.foo", named("f1"))

	assert old is before
	assert new.target.__name__ == "f1"
	assert new.facets["value"] == 42
	assert table.facet("main.foo", "value") == 42
	# The captured snapshot is untouched.
	assert before.target.__name__ == "orig"


def test_install_on_absent_name_reports_absent() -> None:
	table = SymbolTable()
	old, new = table.install("main.foo", named("f1"))
	assert old is None
	assert table.capture("main.foo") is new


def test_restore_is_verbatim() -> None:
	table = SymbolTable()
	table.define("main.foo", named("orig"))
	snap = table.capture("main.foo")
	table.install("main.foo", named("f1"))

	replaced = table.restore("main.foo", snap)

	assert replaced is not None and replaced.target.__name__ == "f1"
	assert table.capture("main.foo") is snap


def test_restore_absent_deletes_binding() -> None:
	table = SymbolTable()
	table.install("main.foo", named("f1"))
	table.restore("main.foo", None)
	assert "main.foo" not in table
	assert table.resolve("main.foo") is None


def test_identical_compares_callable_facet() -> None:
	table = SymbolTable()
	f1 = named("f1")
	_, a = table.install("main.foo", f1)
	table.set_facet("main.foo", "value", 1)
	b = table.capture("main.foo")
	assert a is not b
	assert identical(a, b)
	assert identical(None, None)
	assert not identical(a, None)
	_, c = table.install("main.foo", named("f2"))
	assert not identical(b, c)


def test_undefine_keeps_data_facets() -> None:
	table = SymbolTable()
	table.define("main.foo", named("orig"))
	table.set_facet("main.foo", "value", "data")
	table.undefine("main.foo")
	assert table.resolve("main.foo") is None
	assert table.facet("main.foo", "value") == "data"

	table.define("main.bar", named("bar"))
	table.undefine("main.bar")
	assert "main.bar" not in table


def test_binding_id_of_absent_is_zero() -> None:
	assert binding_id(None) == "0x0"
	table = SymbolTable()
	binding = table.define("main.foo", named("f"))
	assert binding_id(binding) == "0x%x" % id(binding)
