"""Action execution models."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
from pydantic import BaseModel, Field

from ..db.database_models import ProjectDO


class ActionResult(BaseModel):
    """Normalized outcome of an action handler."""

    success: bool = Field(description="Whether the action completed")
    message: str = Field(min_length=1, description="Text safe to show the end user verbatim")
    data: Optional[Dict[str, Any]] = Field(None, description="Structured result data")
    error: Optional[str] = Field(None, description="Internal error detail")

    def snapshot(self) -> Dict[str, Any]:
        """Audit-log view of the result."""
        return {"success": self.success, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class ActionContext:
    """Who and where an action runs for."""

    project: ProjectDO
    chat_id: Union[int, str]
    channel: str = "telegram"
