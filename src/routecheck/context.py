"""Per-run check context.

Everything the reconciliation passes share lives here, built once when
a :class:`~routecheck.checker.RouteChecker` is created and handed to
every resolution call.  Nothing is cached at module level, so a fresh
checker always sees a fresh run.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from routecheck.config import CheckConfig
from routecheck.model import AppModel, ControllerInfo


@dataclass(frozen=True, slots=True)
class CheckContext:
    """Configuration and application model for one run.

    Attributes:
        config: The checker configuration.
        model: The application model snapshot.
        controller_information: ``model.controller_information`` minus
            the ignored controllers.
    """

    config: CheckConfig
    model: AppModel
    controller_information: Mapping[str, ControllerInfo]

    @classmethod
    def build(cls, config: CheckConfig, model: AppModel) -> CheckContext:
        info = {
            name: controller
            for name, controller in model.controller_information.items()
            if name not in config.ignored_controllers
        }
        return cls(
            config=config,
            model=model,
            controller_information=MappingProxyType(info),
        )

    @property
    def root(self) -> Path:
        return self.config.root
