from .calendar_utils import HOURS_PER_YEAR, MONTH_LENGTHS, build_hourly_calendar
from .errors import DataValidityError, InvalidParameterError, LengthMismatchError, SimulationError
from .simulation.battery import (
    BATTERY_PRESETS,
    DEFAULT_BATTERY_SPEC,
    BatteryChemistry,
    BatterySimulationResult,
    BatterySpec,
    get_battery_spec,
    simulate_battery,
)
from .simulation.energy_balance import (
    STORAGE_SCENARIOS,
    StorageScenario,
    StorageScenarioResult,
    evaluate_storage_scenario,
    evaluate_storage_scenarios,
    hourly_energy_balance,
)
from .simulation.lifecycle import LifecycleResult, calculate_lifecycle
from .simulation.load_profiles import StandardLoadProfile, scale_load_profile
from .simulation.multi_year import (
    AnnualEnergyResult,
    ComparisonMode,
    MultiYearAggregationResult,
    MultiYearScenario,
    aggregate_multi_year,
)
from .simulation.pv_series import RawRow, normalize_pv_series, rows_from_pvgis_payload
from .simulation.self_consumption import calculate_eigenverbrauch, calculate_self_consumption
from .reporting import generate_report
from .result_builder import ResultBuilder
from .application import SpeicherApplication

__all__ = [
    "HOURS_PER_YEAR",
    "MONTH_LENGTHS",
    "build_hourly_calendar",
    "SimulationError",
    "LengthMismatchError",
    "InvalidParameterError",
    "DataValidityError",
    "scale_load_profile",
    "StandardLoadProfile",
    "normalize_pv_series",
    "rows_from_pvgis_payload",
    "RawRow",
    "calculate_self_consumption",
    "calculate_eigenverbrauch",
    "BatteryChemistry",
    "BatterySpec",
    "BatterySimulationResult",
    "BATTERY_PRESETS",
    "DEFAULT_BATTERY_SPEC",
    "get_battery_spec",
    "simulate_battery",
    "LifecycleResult",
    "calculate_lifecycle",
    "AnnualEnergyResult",
    "MultiYearScenario",
    "MultiYearAggregationResult",
    "ComparisonMode",
    "aggregate_multi_year",
    "StorageScenario",
    "StorageScenarioResult",
    "STORAGE_SCENARIOS",
    "evaluate_storage_scenario",
    "evaluate_storage_scenarios",
    "hourly_energy_balance",
    "generate_report",
    "ResultBuilder",
    "SpeicherApplication",
]
