from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from .simulation.energy_balance import (  # noqa: E402
    StorageScenarioResult,
    monthly_energy_balance,
    soc_profile_by_month,
)

MONTH_NAMES = [
    "Januar", "Februar", "März", "April", "Mai", "Juni",
    "Juli", "August", "September", "Oktober", "November", "Dezember",
]

MONTH_LABELS = ["Jan", "Feb", "Mär", "Apr", "Mai", "Jun", "Jul", "Aug", "Sep", "Okt", "Nov", "Dez"]


def _slugify(value: str) -> str:
    return "".join(c if c.isalnum() or c in ("-", "_") else "_" for c in value.strip()).strip("_")


def _create_results_directory(scenario_name: str, base_dir: Path) -> Path:
    timestamp = datetime.now().strftime("%y%m%d_%H%M%S")
    slug = _slugify(scenario_name) or "calculation"
    output_dir = base_dir / f"{timestamp}_{slug}"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def _reference_result(results: Sequence[StorageScenarioResult]) -> Optional[StorageScenarioResult]:
    """Largest simulated storage size, used for the SoC tables."""
    simulated = [r for r in results if r.simulation is not None]
    if not simulated:
        return None
    return max(simulated, key=lambda r: r.scenario.capacity_kwh)


def scenario_table(results: Sequence[StorageScenarioResult]) -> pd.DataFrame:
    """One row per storage scenario with the flat summary columns."""
    return pd.DataFrame([result.to_summary() for result in results])


def _plot_monthly_balance(monthly: pd.DataFrame, save_path: Path) -> None:
    x = np.arange(len(monthly))
    width = 0.27
    fig, ax = plt.subplots(figsize=(10, 4.5))
    ax.bar(x - width, monthly["load_kwh"], width, label="Verbrauch", color="#7f7f7f")
    ax.bar(x, monthly["pv_kwh"], width, label="PV-Erzeugung", color="#ff7f0e")
    ax.bar(x + width, monthly["direct_use_kwh"], width, label="Direktverbrauch", color="#2ca02c")
    ax.set_xticks(x)
    ax.set_xticklabels([MONTH_LABELS[int(m) - 1] for m in monthly["month"]])
    ax.set_ylabel("Energie [kWh]")
    ax.set_title("Monatliche Energiebilanz")
    ax.grid(True, axis="y", alpha=0.2)
    ax.legend()
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def _plot_soc_heatmap(soc_profile: pd.DataFrame, title: str, save_path: Path) -> None:
    grid = soc_profile.pivot(index="month_in_year", columns="hour", values="soc_mean")
    fig, ax = plt.subplots(figsize=(10, 4.5))
    image = ax.imshow(grid.values, aspect="auto", cmap="viridis", vmin=0.0, vmax=1.0)
    ax.set_yticks(np.arange(12))
    ax.set_yticklabels(MONTH_LABELS)
    ax.set_xlabel("Stunde")
    ax.set_title(title)
    fig.colorbar(image, ax=ax, label="SoC [p.u.]")
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def _plot_scenario_comparison(table: pd.DataFrame, save_path: Path) -> None:
    x = np.arange(len(table))
    width = 0.38
    fig, ax = plt.subplots(figsize=(8, 4.5))
    ax.bar(x - width / 2, table["self_consumption_share"] * 100.0, width, label="Eigenverbrauchsanteil")
    ax.bar(x + width / 2, table["autarky"] * 100.0, width, label="Autarkiegrad")
    ax.set_xticks(x)
    ax.set_xticklabels(table["label"], rotation=15)
    ax.set_ylabel("Anteil [%]")
    ax.set_ylim(0, 100)
    ax.set_title("Speichervarianten im Vergleich")
    ax.grid(True, axis="y", alpha=0.2)
    ax.legend()
    fig.tight_layout()
    fig.savefig(save_path, dpi=150)
    plt.close(fig)


def _write_text_report(
    output_path: Path,
    scenario_name: str,
    table: pd.DataFrame,
    monthly: pd.DataFrame,
) -> None:
    lines = [f"Berechnung: {scenario_name}", ""]
    lines.append("== Jahresbilanz ==")
    lines.append(f"- Verbrauch: {monthly['load_kwh'].sum():.1f} kWh")
    lines.append(f"- PV-Erzeugung: {monthly['pv_kwh'].sum():.1f} kWh")
    lines.append(f"- Direktverbrauch: {monthly['direct_use_kwh'].sum():.1f} kWh")
    best = monthly.loc[monthly["pv_kwh"].idxmax()]
    lines.append(f"- Ertragsstärkster Monat: {MONTH_NAMES[int(best['month']) - 1]} ({best['pv_kwh']:.1f} kWh)")
    lines.append("")
    lines.append("== Speichervarianten ==")
    lines.append(
        f"{'Variante':<18} | {'Eigenverbr. [kWh]':>17} | {'Netzbezug [kWh]':>15} | "
        f"{'Einspeisung [kWh]':>17} | {'Zyklen/a':>8} | {'Lebensdauer [a]':>15}"
    )
    lines.append("-" * 106)
    for row in table.itertuples():
        cycles = "-" if pd.isna(row.cycles_per_year) else f"{int(row.cycles_per_year):d}"
        lifetime = "-" if pd.isna(row.effective_lifetime_years) else f"{row.effective_lifetime_years:.1f}"
        lines.append(
            f"{row.label:<18} | {row.self_consumption_kwh:17.1f} | {row.grid_import_kwh:15.1f} | "
            f"{row.feed_in_kwh:17.1f} | {cycles:>8} | {lifetime:>15}"
        )
    output_path.write_text("\n".join(lines), encoding="utf-8")


def generate_report(
    scenario_name: str,
    results: Sequence[StorageScenarioResult],
    hourly_balance: pd.DataFrame,
    output_root: Path | str = "results",
) -> Path:
    """
    Write CSV tables, plots and a text summary for one household calculation.

    Files written to a new timestamped directory below ``output_root``:
    ``scenarios.csv``, ``monthly_balance.csv``, ``summary.txt``,
    ``monthly_balance.png``, ``scenario_comparison.png`` and, when at least
    one scenario has storage, ``soc_profile.csv`` and ``soc_heatmap.png``
    for the largest storage size.

    Returns:
        Path of the created directory.
    """
    output_dir = _create_results_directory(scenario_name, Path(output_root))

    table = scenario_table(results)
    table.to_csv(output_dir / "scenarios.csv", index=False)

    monthly = monthly_energy_balance(hourly_balance)
    monthly.to_csv(output_dir / "monthly_balance.csv", index=False)
    _plot_monthly_balance(monthly, output_dir / "monthly_balance.png")

    if not table.empty:
        _plot_scenario_comparison(table, output_dir / "scenario_comparison.png")

    reference = _reference_result(results)
    if reference is not None:
        soc_profile = soc_profile_by_month(reference.simulation)
        soc_profile.to_csv(output_dir / "soc_profile.csv", index=False)
        _plot_soc_heatmap(
            soc_profile,
            f"Mittlerer Ladezustand: {reference.scenario.label}",
            output_dir / "soc_heatmap.png",
        )

    _write_text_report(output_dir / "summary.txt", scenario_name, table, monthly)
    return output_dir
