"""
Database persistence layer for household calculations and their results.

Stores calculation inputs and run summaries as JSON so that earlier
comparisons can be listed and re-opened without recomputation.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Iterable, Mapping, Sequence

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from .db.models import CalculationRecord, RunResultRecord
from .db.session import get_session_factory


def _asdict_safe(obj: Any) -> Dict[str, Any]:
    """
    Convert dataclasses, pydantic models and mappings to plain dictionaries.

    Returns an empty dict for None.

    Raises:
        TypeError: If the object type is not supported.
    """
    if obj is None:
        return {}
    if is_dataclass(obj):
        return asdict(obj)
    if isinstance(obj, Mapping):
        return dict(obj)
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    raise TypeError(f"Unsupported object type for serialization: {type(obj)!r}")


class PersistenceService:
    """
    Transactional access to recorded calculations and run results.

    Every public method opens its own session, so the service can be shared
    between threads and API requests.

    Example:
        ```python
        service = PersistenceService()
        calculation = service.record_calculation(
            name="Musterhaus",
            annual_consumption_kwh=4000.0,
            chemistry="LiFePO4",
            capacities_kwh=[0.0, 5.0, 7.5, 10.0],
        )
        service.record_run_result(
            "household",
            {"scenarios": [...]},
            calculation=calculation,
        )
        latest = service.list_run_results(limit=10)
        ```
    """

    def __init__(self, session_factory: type[Session] | None = None) -> None:
        """
        Args:
            session_factory: SQLAlchemy session factory. Defaults to the
                configured database
                (:func:`speicher_sim.db.session.get_session_factory`); tests
                pass an in-memory SQLite factory.
        """
        self._session_factory = session_factory or get_session_factory()

    @contextmanager
    def session(self) -> Iterable[Session]:
        """
        Yield a session that commits on success and rolls back on error.

        The session is always closed when the block exits.
        """
        session: Session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def record_calculation(
        self,
        name: str,
        annual_consumption_kwh: float,
        chemistry: str,
        capacities_kwh: Sequence[float],
        *,
        apply_roundtrip_losses: bool = False,
        metadata: Mapping[str, Any] | None = None,
    ) -> CalculationRecord:
        """
        Persist the inputs of a household calculation.

        Args:
            name: Calculation label.
            annual_consumption_kwh: Annual consumption the load was scaled to.
            chemistry: Battery chemistry preset value.
            capacities_kwh: Compared nominal storage sizes.
            apply_roundtrip_losses: Whether the lossy storage model was used.
            metadata: Optional additional info (input provenance).

        Returns:
            CalculationRecord instance.
        """
        with self.session() as session:
            record = CalculationRecord(
                name=name,
                annual_consumption_kwh=float(annual_consumption_kwh),
                chemistry=chemistry,
                apply_roundtrip_losses=bool(apply_roundtrip_losses),
                capacities_kwh=[float(c) for c in capacities_kwh],
                extra_metadata=_asdict_safe(metadata),
            )
            session.add(record)
            session.flush()
            return record

    def record_run_result(
        self,
        result_type: str,
        summary: Mapping[str, Any],
        *,
        calculation: CalculationRecord | None = None,
        output_dir: str | None = None,
    ) -> RunResultRecord:
        """
        Store the outcome of a calculation run.

        Args:
            result_type: e.g. ``"household"``.
            summary: JSON-serializable metrics.
            calculation: Optional linked calculation inputs.
            output_dir: Filesystem path containing exported artifacts.
        """
        with self.session() as session:
            record = RunResultRecord(
                result_type=result_type,
                summary=dict(summary),
                calculation_id=calculation.id if calculation else None,
                output_dir=output_dir,
            )
            session.add(record)
            session.flush()
            return record

    def list_run_results(self, limit: int = 50) -> list[RunResultRecord]:
        """
        Fetch the latest run results ordered by creation date (newest first).

        Args:
            limit: Maximum number of records to return.
        """
        with self.session() as session:
            stmt = (
                select(RunResultRecord)
                .order_by(desc(RunResultRecord.created_at), desc(RunResultRecord.id))
                .limit(limit)
            )
            result = session.execute(stmt).scalars().all()
            return list(result)

    def get_run_result(self, run_id: int) -> RunResultRecord | None:
        """Return the run result with ``run_id`` or None if it does not exist."""
        with self.session() as session:
            return session.get(RunResultRecord, run_id)

    def list_calculations(self) -> list[CalculationRecord]:
        """List all recorded calculations, newest first."""
        with self.session() as session:
            stmt = select(CalculationRecord).order_by(desc(CalculationRecord.id))
            return list(session.execute(stmt).scalars().all())
