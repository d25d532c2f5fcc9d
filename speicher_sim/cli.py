from __future__ import annotations

import argparse
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Sequence

import pandas as pd

from .application import SpeicherApplication
from .config import load_settings
from .db.session import init_db
from .errors import SimulationError
from .persistence import PersistenceService
from .result_builder import ResultBuilder
from .simulation.battery import BATTERY_PRESETS, BatteryChemistry
from .simulation.multi_year import ComparisonMode


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Build the CLI argument parser used by entry points.

    Returns:
        Configured argparse.ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(description="Speicher-Simulation: PV-Eigenverbrauch mit Batteriespeicher")
    sub = parser.add_subparsers(dest="command")

    calculate = sub.add_parser("calculate", help="Speichervarianten für einen Haushalt vergleichen")
    calculate.add_argument(
        "--annual-kwh",
        type=float,
        required=True,
        dest="annual_kwh",
        help="Jahresverbrauch des Haushalts in kWh",
    )
    calculate.add_argument(
        "--weights-file",
        required=True,
        help="Referenz-Lastprofil (8760 Gewichte) als JSON-Liste oder CSV mit einer Spalte",
    )
    calculate.add_argument(
        "--pv-file",
        required=True,
        help="PV-Rohdaten als JSON: Liste von Zeilen oder PVGIS-seriescalc-Antwort",
    )
    calculate.add_argument(
        "--chemistry",
        choices=[c.value for c in BatteryChemistry],
        default=BatteryChemistry.LFP.value,
        help="Zellchemie des Speichers",
    )
    calculate.add_argument(
        "--capacities",
        type=str,
        default=None,
        help="Nennkapazitäten in kWh, durch Komma getrennt (z. B. 0,5,7.5,10)",
    )
    calculate.add_argument(
        "--mode",
        choices=[m.value for m in ComparisonMode],
        default=ComparisonMode.FIFTEEN_YEARS.value,
        help="Vergleichszeitraum der Mehrjahresbetrachtung",
    )
    calculate.add_argument("--name", default="household", help="Bezeichnung der Berechnung")
    calculate.add_argument(
        "--lossy",
        action="store_true",
        help="Round-Trip-Wirkungsgrad beim Laden berücksichtigen",
    )
    calculate.add_argument(
        "--no-save",
        action="store_true",
        help="Keine Ausgabedateien im results-Verzeichnis speichern",
    )

    sub.add_parser("presets", help="Verfügbare Speicher-Presets anzeigen")

    runs = sub.add_parser("runs", help="Gespeicherte Berechnungen anzeigen")
    runs_sub = runs.add_subparsers(dest="runs_command")

    runs_list = runs_sub.add_parser("list", help="Letzte Berechnungen auflisten")
    runs_list.add_argument("--limit", type=int, default=20, help="Maximale Anzahl Einträge")

    runs_show = runs_sub.add_parser("show", help="Eine Berechnung vollständig anzeigen")
    runs_show.add_argument("--id", type=int, required=True, help="ID des Laufs")

    return parser


def _load_json_file(path: str | Path) -> Any:
    file_path = Path(path)
    if not file_path.exists():
        raise SystemExit(f"Datei nicht gefunden: {file_path}")
    try:
        return json.loads(file_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SystemExit(f"Ungültige JSON-Datei ({file_path}): {exc}") from exc


def _load_weights(path: str | Path) -> list[float]:
    """
    Read reference weights from a JSON list, a JSON object with ``weights``,
    or a CSV file whose first column holds the values.
    """
    file_path = Path(path)
    if file_path.suffix.lower() == ".csv":
        if not file_path.exists():
            raise SystemExit(f"Datei nicht gefunden: {file_path}")
        frame = pd.read_csv(file_path, header=None, comment="#")
        column = pd.to_numeric(frame.iloc[:, 0], errors="coerce").dropna()
        return column.astype(float).tolist()

    data = _load_json_file(file_path)
    if isinstance(data, dict):
        data = data.get("weights")
    if not isinstance(data, list):
        raise SystemExit(f"Keine Gewichtsliste in {file_path} gefunden.")
    return data


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str, ensure_ascii=False))


def _parse_float_list(raw: str | None) -> list[float] | None:
    if raw is None:
        return None
    values = []
    for token in raw.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            values.append(float(token))
        except ValueError as exc:
            raise SystemExit(f"Ungültige Kapazität: {token!r}") from exc
    return values


def _run_payload(record) -> dict[str, Any]:
    return {
        "id": record.id,
        "result_type": record.result_type,
        "calculation_id": record.calculation_id,
        "output_dir": record.output_dir,
        "created_at": record.created_at,
    }


def main(argv: Sequence[str] | None = None) -> None:
    """
    CLI entry point for household calculations and stored runs.

    Args:
        argv: Optional sequence of CLI args (defaults to sys.argv).
    """
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    if args.command == "presets":
        _print_json({chemistry.value: asdict(spec) for chemistry, spec in BATTERY_PRESETS.items()})
        return

    init_db()
    persistence = PersistenceService()

    if args.command == "calculate":
        save_outputs = not args.no_save
        app = SpeicherApplication(
            save_outputs=save_outputs,
            persistence=persistence,
            result_builder=ResultBuilder(load_settings().results_dir) if save_outputs else None,
        )
        pv_data = _load_json_file(args.pv_file)
        pv_kwargs: dict[str, Any] = (
            {"pv_payload": pv_data} if isinstance(pv_data, dict) else {"pv_rows": pv_data}
        )
        try:
            summary = app.run_household_calculation(
                annual_consumption_kwh=args.annual_kwh,
                reference_weights=_load_weights(args.weights_file),
                chemistry=args.chemistry,
                capacities_kwh=_parse_float_list(args.capacities),
                apply_roundtrip_losses=args.lossy,
                comparison_mode=args.mode,
                scenario_name=args.name,
                **pv_kwargs,
            )
        except SimulationError as exc:
            raise SystemExit(f"Berechnung fehlgeschlagen ({exc.kind}): {exc}") from exc
        summary.pop("plots_data", None)
        _print_json(summary)
        return

    if args.command == "runs":
        if not args.runs_command:
            parser.error("Unterbefehl für runs angeben (list/show).")

        if args.runs_command == "list":
            _print_json([_run_payload(record) for record in persistence.list_run_results(limit=args.limit)])
            return

        if args.runs_command == "show":
            record = persistence.get_run_result(args.id)
            if record is None:
                raise SystemExit(f"Lauf nicht gefunden (ID={args.id}).")
            payload = _run_payload(record)
            payload["summary"] = record.summary
            _print_json(payload)
            return

        parser.error(f"Unbekannter runs-Unterbefehl: {args.runs_command}")

    parser.error(f"Unbekannter Befehl: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    main()
