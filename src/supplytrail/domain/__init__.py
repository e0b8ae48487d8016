"""Supply-chain provenance domain: model, ports and reconstruction services."""

from __future__ import annotations

from .events import StageEventQuery
from .reconstruction import ProvenanceReconstructor, select_event
from .tracking import ProvenanceTracker

__all__ = ["ProvenanceReconstructor", "ProvenanceTracker", "StageEventQuery", "select_event"]
