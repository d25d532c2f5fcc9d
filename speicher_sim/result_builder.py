from __future__ import annotations

from pathlib import Path
from typing import Sequence

import pandas as pd

from .reporting import generate_report
from .simulation.energy_balance import StorageScenarioResult


class ResultBuilder:
    """
    Handle export of household calculation deliverables.
    """

    def __init__(self, output_root: str | Path = "results") -> None:
        """
        Args:
            output_root: Base directory for generated assets.
        """
        self.output_root = Path(output_root)

    def build_household_report(
        self,
        scenario_name: str,
        *,
        results: Sequence[StorageScenarioResult],
        hourly_balance: pd.DataFrame,
    ) -> Path:
        """
        Save the report of one household calculation.

        Args:
            scenario_name: Name used for the output directory.
            results: Evaluated storage scenarios.
            hourly_balance: Output of ``hourly_energy_balance``.
        """
        return generate_report(
            scenario_name=scenario_name,
            results=results,
            hourly_balance=hourly_balance,
            output_root=self.output_root,
        )
