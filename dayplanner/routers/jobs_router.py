# Copyright (c) 2025 Shiladitya Mallick
# This file is part of the DayPlanner project.
# Licensed under the MIT License - see the LICENSE file for details.


from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from dayplanner.context import PlannerContext, get_context
from dayplanner.services.rollover_service import run_midnight_rollover
from dayplanner.utils.auth_utils import require_cron_token

router = APIRouter(tags=["Jobs"])


@router.get("/midnight-transfer-delete")
async def midnight_transfer_delete(
    context: PlannerContext = Depends(get_context),
    cron: dict = Depends(require_cron_token),
):
    summary = await run_in_threadpool(run_midnight_rollover, context)
    return {"success": True, **summary}
