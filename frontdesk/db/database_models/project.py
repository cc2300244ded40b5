"""Project database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


# Feature flags a project can opt into
FEATURE_CATALOG = (
    "auto_lead_reply",
    "trial_booking",
    "follow_up_reminder",
    "google_review_reply",
    "seo_content",
    "renewal_reminder",
)


@dataclass
class ProjectDO:
    """Project data object - maps to projects table."""

    id: str
    user_id: Optional[str] = None
    ai_name: str = ""
    business_name: str = ""
    business_category: str = ""
    business_location: str = ""
    business_description: str = ""
    enabled_features: List[str] = field(default_factory=list)
    status: str = "draft"
    telegram_token: Optional[str] = None
    telegram_bot_username: Optional[str] = None
    google_connected: bool = False
    google_access_token: Optional[str] = None
    google_refresh_token: Optional[str] = None
    google_location_id: Optional[str] = None
    google_last_validated_at: Optional[datetime] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def has_feature(self, feature: str) -> bool:
        return feature in (self.enabled_features or [])
