from __future__ import annotations

from speicher_sim import ResultBuilder, SpeicherApplication
from speicher_sim.config import load_settings
from speicher_sim.scenario_setup import build_demo_pv_rows, build_demo_reference_weights


def main() -> None:
    app = SpeicherApplication(
        save_outputs=True,
        persistence=None,
        result_builder=ResultBuilder(load_settings().results_dir),
    )
    summary = app.run_household_calculation(
        annual_consumption_kwh=4000.0,
        reference_weights=build_demo_reference_weights(),
        pv_rows=build_demo_pv_rows(system_size_kwp=8.0, year=2020),
        scenario_name="musterhaus_4000kwh",
    )
    for scenario in summary["scenarios"]:
        lifetime = scenario["effective_lifetime_years"]
        print(
            f"{scenario['label']:<18} Eigenverbrauch {scenario['self_consumption_kwh']:8.1f} kWh, "
            f"Autarkie {scenario['autarky']:.1%}"
            + (f", Lebensdauer {lifetime:.1f} a" if lifetime is not None else "")
        )
    print(f"Report gespeichert in: {summary['output_dir']}")


if __name__ == "__main__":
    main()
