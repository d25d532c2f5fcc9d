"""
Stored run results.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from ...persistence import PersistenceService
from .. import dependencies
from ..schemas import calculation as calc_schemas

router = APIRouter(prefix="/api", tags=["runs"])


@router.get("/runs", response_model=list[calc_schemas.RunResult])
def list_runs(
    limit: int = Query(50, ge=1, le=500),
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> list[calc_schemas.RunResult]:
    """
    Latest stored calculation runs, newest first.
    """
    records = persistence.list_run_results(limit=limit)
    return records


@router.get("/runs/{run_id}", response_model=calc_schemas.RunResult)
def get_run(
    run_id: int,
    persistence: PersistenceService = Depends(dependencies.get_persistence_service),
) -> calc_schemas.RunResult:
    """
    One stored run.

    Raises:
        HTTPException 404: If no run with ``run_id`` exists.
    """
    record = persistence.get_run_result(run_id)
    if record is None:
        raise HTTPException(status_code=404, detail=f"Run {run_id} not found")
    return record
