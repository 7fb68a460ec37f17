# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Transition tracer.

When enabled, every install/uninstall of a binding is logged with the identity
of the snapshot being replaced and the one replacing it, e.g.:

	lexsubs: creating main.foo (0x0 => 0x7f3a...)

Tracing never changes control flow.
"""

from __future__ import annotations

import logging

from lexsubs.config import debug_from_env
from lexsubs.symtab import Snapshot, binding_id

log = logging.getLogger("lexsubs.trace")


class Tracer:
	def __init__(self, enabled: bool | None = None) -> None:
		self.enabled = debug_from_env() if enabled is None else bool(enabled)

	def set_debug(self, flag: bool) -> bool:
		"""Set the flag; returns the previous value."""
		old, self.enabled = self.enabled, bool(flag)
		return old

	def start_trace(self) -> None:
		self.set_debug(True)

	def stop_trace(self) -> None:
		self.set_debug(False)

	def transition(self, owner: str, action: str, name: str, old: Snapshot, new: Snapshot) -> None:
		if not self.enabled:
			return
		log.debug("%s: %s %s (%s => %s)", owner, action, name, binding_id(old), binding_id(new))


__all__ = ["Tracer"]
