# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Common diagnostic structure for reported (non-aborting) conditions.

Conditions that only affect a single name, such as a shadowed removal target,
are appended to the context's diagnostics sink instead of being raised, so a
batch of declarations keeps going past them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

SHADOW_CONFLICT = "shadow-conflict"
UNKNOWN_REMOVAL_TARGET = "unknown-removal-target"
REENTRANCY_UNDERFLOW = "reentrancy-underflow"


@dataclass
class Diagnostic:
	"""Represents a reported condition (error/warning)."""

	message: str
	code: str | None = None
	# Which component emitted the diagnostic ("ledger", "scope", ...).
	phase: str | None = None
	severity: str = "error"
	# Fully-qualified symbol the diagnostic is about, if any.
	name: Optional[str] = None
	owner: Optional[str] = None
	notes: list[str] = field(default_factory=list)

	def to_dict(self) -> Dict[str, Any]:
		return {
			"code": self.code,
			"phase": self.phase,
			"severity": self.severity,
			"message": self.message,
			"name": self.name,
			"owner": self.owner,
			"notes": list(self.notes),
		}

	def format_human(self) -> str:
		prefix = f"{self.owner}: " if self.owner else ""
		return f"{prefix}{self.severity}: {self.message}"


__all__ = [
	"Diagnostic",
	"SHADOW_CONFLICT",
	"UNKNOWN_REMOVAL_TARGET",
	"REENTRANCY_UNDERFLOW",
]
