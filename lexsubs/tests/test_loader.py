# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from typing import Any, Mapping

import pytest

from lexsubs.blocks import BlockStack
from lexsubs.loader import LoadHook, ModuleLoader


def _recording_hook(label: str, events: list[str]) -> LoadHook:
	def before(hints: Mapping[str, Any], module: str) -> None:
		events.append(f"{label}:before:{module}")

	def after(hints: Mapping[str, Any], module: str) -> None:
		events.append(f"{label}:after:{module}")

	return LoadHook(label=label, before=before, after=after)


def test_hook_chain_is_newest_first_and_unwinds_in_reverse() -> None:
	events: list[str] = []

	def delegate(module: str) -> str:
		events.append(f"load:{module}")
		return module.upper()

	loader = ModuleLoader(delegate=delegate)
	loader.add_hook(_recording_hook("h1", events))
	loader.add_hook(_recording_hook("h2", events))

	assert [h.label for h in loader.hooks()] == ["h2", "h1"]
	assert loader.load("m") == "M"
	assert events == ["h2:before:m", "h1:before:m", "load:m", "h1:after:m", "h2:after:m"]


def test_after_hooks_run_when_the_delegate_fails() -> None:
	events: list[str] = []

	def delegate(module: str) -> None:
		raise ImportError(module)

	loader = ModuleLoader(delegate=delegate)
	loader.add_hook(_recording_hook("h1", events))
	with pytest.raises(ImportError):
		loader.load("m")
	assert events == ["h1:before:m", "h1:after:m"]
	assert loader.loading == []


def test_failing_before_hook_unwinds_hooks_that_ran() -> None:
	events: list[str] = []

	def broken(hints: Mapping[str, Any], module: str) -> None:
		raise RuntimeError("hook failed")

	loader = ModuleLoader(delegate=lambda module: events.append("load"))
	loader.add_hook(LoadHook(label="broken", before=broken, after=broken))
	loader.add_hook(_recording_hook("h2", events))
	with pytest.raises(RuntimeError, match="hook failed"):
		loader.load("m")
	assert events == ["h2:before:m", "h2:after:m"]


def test_remove_hook_unlinks_from_the_middle() -> None:
	loader = ModuleLoader(delegate=lambda module: None)
	h1 = loader.add_hook(_recording_hook("h1", []))
	h2 = loader.add_hook(_recording_hook("h2", []))
	h3 = loader.add_hook(_recording_hook("h3", []))
	loader.remove_hook(h2)
	assert [h.label for h in loader.hooks()] == ["h3", "h1"]
	assert h3.next is h1
	with pytest.raises(ValueError):
		loader.remove_hook(h2)


def test_delegate_runs_in_a_fresh_unit() -> None:
	blocks = BlockStack()
	blocks.current().hints["k"] = "requiring"
	seen: dict[str, Any] = {}
	received: list[Mapping[str, Any]] = []

	def delegate(module: str) -> None:
		seen["hints"] = dict(blocks.current().hints)
		seen["package"] = blocks.current().package

	loader = ModuleLoader(blocks, delegate)
	loader.add_hook(LoadHook(label="spy", before=lambda hints, m: received.append(hints), after=lambda hints, m: None))
	loader.load("pkg.mod")
	assert seen == {"hints": {}, "package": "pkg.mod"}
	assert received[0]["k"] == "requiring"


def test_empty_module_name_is_rejected() -> None:
	loader = ModuleLoader(delegate=lambda module: None)
	with pytest.raises(ValueError):
		loader.load("")


def test_default_delegate_imports_python_modules() -> None:
	loader = ModuleLoader()
	module = loader.load("json")
	assert module.dumps([1]) == "[1]"
