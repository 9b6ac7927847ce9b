"""Unit tests for the display model base."""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from kubepane.integrations.kubernetes.models.base import K8sEntityBase, _safe_get


@pytest.mark.unit
@pytest.mark.kubernetes
class TestSafeGet:
    """Tests for nested attribute access."""

    def test_walks_attributes(self) -> None:
        """Nested attributes are followed."""
        obj = SimpleNamespace(metadata=SimpleNamespace(name="web"))
        assert _safe_get(obj, "metadata", "name") == "web"

    def test_default_on_missing_link(self) -> None:
        """A None or missing link yields the default."""
        obj = SimpleNamespace(metadata=None)
        assert _safe_get(obj, "metadata", "name", default="?") == "?"
        assert _safe_get(obj, "status", "phase", default="Unknown") == "Unknown"


@pytest.mark.unit
@pytest.mark.kubernetes
class TestK8sEntityBase:
    """Tests for K8sEntityBase."""

    def test_frozen(self) -> None:
        """Display models cannot be edited in place."""
        entity = K8sEntityBase(name="web")
        with pytest.raises(ValidationError):
            entity.name = "other"  # type: ignore[misc]

    def test_strips_and_ignores_extra(self) -> None:
        """Whitespace is trimmed and unknown fields dropped."""
        entity = K8sEntityBase(name=" web ", namespace="default", uid="123")  # type: ignore[call-arg]
        assert entity.name == "web"
        assert not hasattr(entity, "uid")
