from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Sequence

from .adapters import Adapters
from .config import ConfigStore
from .context import RunContext, RunSummary
from .engine import Engine
from .errors import SetupCancelled

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything the phases share for one run."""

    ctx: RunContext
    config: ConfigStore
    adapters: Adapters
    engine: Engine
    summary: RunSummary = field(default_factory=RunSummary)

    def gate(self, message: str, *, default: bool = True) -> None:
        """Confirmation gate between phases; declining cancels the run."""

        if not self.adapters.confirm(message, default):
            raise SetupCancelled(f"Setup stopped at: {message}")


class Phase(Protocol):
    """A single installer phase."""

    phase_id: str
    title: str

    def run(self, session: Session) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_phases: List[str]
    summary: RunSummary


def run_pipeline(*, session: Session, phases: Sequence[Phase]) -> PipelineResult:
    """Run phases in order; any exception stops the pipeline."""

    ran: List[str] = []
    for phase in phases:
        logger.info("==== %s ====", phase.title)
        logger.debug("Running phase %s", phase.phase_id)
        phase.run(session)
        ran.append(phase.phase_id)

    return PipelineResult(ran_phases=ran, summary=session.summary)
