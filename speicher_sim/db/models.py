"""
SQLAlchemy models for recorded household calculations.

A :class:`CalculationRecord` stores the inputs of one household calculation
(annual consumption, chemistry, compared capacities); every evaluation of
those inputs is stored as a :class:`RunResultRecord` with its JSON summary
and, when a report was written, the output directory.
"""

from __future__ import annotations

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class TimestampMixin:
    """
    Mixin adding database-managed ``created_at``/``updated_at`` columns.

    ``created_at`` is set on insert; ``updated_at`` is refreshed on every
    update. Both are timezone-aware.
    """
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class CalculationRecord(Base, TimestampMixin):
    """
    Inputs of one household storage calculation.

    Attributes:
        id: Primary key (auto-increment).
        name: Free-form label of the calculation (e.g. "Musterhaus 4000 kWh").
        annual_consumption_kwh: Annual household consumption the load
            profile was scaled to.
        chemistry: Battery chemistry preset used (e.g. "LiFePO4").
        apply_roundtrip_losses: Whether the lossy storage model was used.
        capacities_kwh: Compared nominal storage sizes (JSON list).
        extra_metadata: Input provenance, e.g. PV row count or source
            (stored in the ``metadata`` column).
        runs: Run results produced from these inputs.
    """
    __tablename__ = "calculations"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    annual_consumption_kwh = Column(Float, nullable=False)
    chemistry = Column(String(50), nullable=False)
    apply_roundtrip_losses = Column(Boolean, nullable=False, default=False)
    capacities_kwh = Column(JSON, nullable=False)
    extra_metadata = Column("metadata", JSON, nullable=True)

    runs = relationship("RunResultRecord", back_populates="calculation")


class RunResultRecord(Base, TimestampMixin):
    """
    Outcome of a calculation run.

    Attributes:
        id: Primary key (auto-increment).
        result_type: Kind of run, e.g. ``"household"``.
        summary: JSON summary with one entry per storage scenario.
        output_dir: Directory holding the exported report, if any.
        calculation_id: Foreign key to the calculation inputs.
    """
    __tablename__ = "run_results"

    id = Column(Integer, primary_key=True)
    result_type = Column(String(50), nullable=False)
    summary = Column(JSON, nullable=False)
    output_dir = Column(Text, nullable=True)

    calculation_id = Column(Integer, ForeignKey("calculations.id"), nullable=True)

    calculation = relationship("CalculationRecord", back_populates="runs")
