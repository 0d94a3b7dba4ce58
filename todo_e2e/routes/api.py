# routes/api.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from todo_e2e.config.settings import Config
from todo_e2e.core.scenarios import build_scenarios
from todo_e2e.services.suite_service import SuiteService

router = APIRouter()

# Last report of this process; runs are not persisted.
last_results = None


class RunRequest(BaseModel):
    base_url: Optional[str] = None
    scenarios: Optional[List[str]] = None


def get_suite_service():
    return SuiteService(Config)


@router.post('/run-suite')
def run_suite(request: Optional[RunRequest] = None, service: SuiteService = Depends(get_suite_service)):
    global last_results
    request = request or RunRequest()
    try:
        report = service.run_and_report(request.scenarios, base_url=request.base_url)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    last_results = report.to_dict()
    if report.fatal_error:
        raise HTTPException(status_code=500, detail=report.fatal_error)
    return {"status": "passed" if report.exit_code == 0 else "failed", "summary": last_results['summary'], "report": last_results}


@router.get('/results')
def get_results():
    if last_results is None:
        raise HTTPException(status_code=404, detail="No results available. Run the suite first.")
    return last_results


@router.get('/scenarios')
def list_scenarios():
    return [{"name": s.name, "description": s.description} for s in build_scenarios()]


@router.get('/status')
def status():
    return {"status": "ok"}
