# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
import pytest

from lexsubs.config import DEBUG_ENV_VAR


@pytest.fixture(autouse=True)
def _quiet_tracer_env(monkeypatch: pytest.MonkeyPatch) -> None:
	"""
	Contexts read their initial trace flag from the environment.

	Tests assert on tracing explicitly, so a developer's LEXSUBS_DEBUG must not
	leak into them.
	"""
	monkeypatch.delenv(DEBUG_ENV_VAR, raising=False)
