"""Probes for process-level events: engines, startup and shutdown.

Bounded contexts keep their own probes next to the code they observe.
"""

from infrastructure.observability.probes import (
    DatabaseProbe,
    DefaultDatabaseProbe,
)
from infrastructure.observability.startup_probe import (
    DefaultStartupProbe,
    StartupProbe,
)
from shared_kernel.observability_context import ObservationContext

__all__ = [
    "DatabaseProbe",
    "DefaultDatabaseProbe",
    "DefaultStartupProbe",
    "ObservationContext",
    "StartupProbe",
]
