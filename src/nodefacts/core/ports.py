"""Port interfaces for measurement producers.

Collectors live outside this package. They only need to satisfy
CollectorPort to be used with take_snapshot().
"""

from typing import Protocol, runtime_checkable

from nodefacts.core.models import Measurement


@runtime_checkable
class CollectorPort(Protocol):
    """Port for anything that produces a Measurement.

    Examples: a GPU collector wrapping nvidia-smi, a systemd collector reading
    unit properties, a Kubernetes collector listing cluster objects.
    """

    def collect(self) -> Measurement:
        """Collect one Measurement.

        Returns:
            The collected measurement. Redaction and validation are applied
            by the caller.
        """
        ...
