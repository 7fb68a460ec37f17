# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LexSubsError(Exception):
	"""
	A structured, serializable error for the override engine.

	`reason_code` is stable and meant for programmatic matching; `message` is
	for humans.
	"""

	reason_code: str
	message: str
	name: str | None = None
	owner: str | None = None
	module: str | None = None

	def __str__(self) -> str:
		return self.format_human()

	def to_dict(self) -> dict[str, Any]:
		return {
			"reason_code": self.reason_code,
			"message": self.message,
			"name": self.name,
			"owner": self.owner,
			"module": self.module,
		}

	def format_human(self) -> str:
		parts: list[str] = [f"[{self.reason_code}] {self.message}"]
		if self.owner:
			parts.append(f"owner={self.owner}")
		if self.name:
			parts.append(f"name={self.name}")
		if self.module:
			parts.append(f"module={self.module}")
		return " ".join(parts)


@dataclass(frozen=True)
class ResolutionError(LexSubsError):
	"""A declaration value could not be resolved to a callable."""


@dataclass(frozen=True)
class UnresolvedSymbolError(LexSubsError):
	"""A call site found neither a binding nor an AUTOLOAD fallback."""


__all__ = ["LexSubsError", "ResolutionError", "UnresolvedSymbolError"]
