"""Action registry REST API routes - V1."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ...actions.registry import ActionRegistry
from ...models.telegram import ActionInfo

router = APIRouter(prefix="/api/v1/actions", tags=["Actions"])

# Action registry (set by main.py)
registry: ActionRegistry = None


def get_registry() -> ActionRegistry:
    """Dependency to get the action registry."""
    if registry is None:
        raise HTTPException(status_code=500, detail="Action registry not initialized")
    return registry


@router.get("", response_model=List[ActionInfo])
async def list_actions(reg: ActionRegistry = Depends(get_registry)):
    """List registered actions with the feature each one requires."""
    return [ActionInfo(**row) for row in reg.list_actions()]
