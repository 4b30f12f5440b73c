# Pipeline triggers for the scheduler
# Protected routes: service token or administrator only

import logging

from fastapi import APIRouter, Depends, Query

from helix.auth import UserInfo, require_service
from helix.config import Settings, get_settings
from helix.responses import error_response, ok
from helix.workflow import AutomationWorkflow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/pipeline", tags=["pipeline"])


def get_workflow(settings: Settings = Depends(get_settings)) -> AutomationWorkflow:
    return AutomationWorkflow.from_settings(settings)


@router.post("/discovery/backfill")
async def run_backfill(caller: UserInfo = Depends(require_service),
                       workflow: AutomationWorkflow = Depends(get_workflow)):
    """Historical painpoint sweep over the last six months."""
    try:
        result = await workflow.discovery.run_backfill()
        return ok({
            "message": f"Successfully backfilled {result['stored']} historical painpoints",
            **result,
        })
    except Exception as e:
        return error_response(e)


@router.post("/discovery/daily")
async def run_daily_discovery(caller: UserInfo = Depends(require_service),
                              workflow: AutomationWorkflow = Depends(get_workflow)):
    try:
        result = await workflow.discovery.run_daily()
        return ok({
            "message": f"Daily discovery completed: {result['new_painpoints']} new painpoints found",
            **result,
        })
    except Exception as e:
        return error_response(e)


@router.post("/analysis")
async def run_analysis(caller: UserInfo = Depends(require_service),
                       workflow: AutomationWorkflow = Depends(get_workflow)):
    try:
        result = await workflow.engine.run()
        return ok({
            "message": f"Successfully analyzed {result['analyzed_count']} Build Together opportunities",
            **result,
        })
    except Exception as e:
        return error_response(e)


@router.post("/reports/daily")
async def run_daily_report(caller: UserInfo = Depends(require_service),
                           workflow: AutomationWorkflow = Depends(get_workflow)):
    try:
        return ok(await workflow.aggregator.run())
    except Exception as e:
        return error_response(e)


@router.post("/automation")
async def run_automation(force: bool = Query(False),
                         caller: UserInfo = Depends(require_service),
                         workflow: AutomationWorkflow = Depends(get_workflow)):
    """
    Run discovery, analysis and the report in order.

    A run already completed today is replayed unless force is set.
    """
    try:
        logger.info(f"Automation triggered by {caller.uid}")
        return ok(await workflow.run(force=force))
    except Exception as e:
        return error_response(e)
