from agent_hub.core.models.action_item import ActionItem
from agent_hub.core.models.agent_log import AgentLog
from agent_hub.core.models.base import Base
from agent_hub.core.models.classified_email import ClassifiedEmail
from agent_hub.core.models.commercial_item import CommercialItem
from agent_hub.core.models.enums import (
    AccountStatus,
    AgentLogEvent,
    AgentType,
    BriefingScope,
    FocusItemType,
    ScheduleType,
    UrgencyLevel,
)
from agent_hub.core.models.financial_item import FinancialItem
from agent_hub.core.models.focus_briefing import FocusBriefingRecord
from agent_hub.core.models.legal_analysis import LegalAnalysis
from agent_hub.core.models.usage_log import UsageLog
from agent_hub.core.models.user import User
from agent_hub.core.models.user_config import UserConfig

__all__ = [
    "AccountStatus",
    "ActionItem",
    "AgentLog",
    "AgentLogEvent",
    "AgentType",
    "Base",
    "BriefingScope",
    "ClassifiedEmail",
    "CommercialItem",
    "FinancialItem",
    "FocusBriefingRecord",
    "FocusItemType",
    "LegalAnalysis",
    "ScheduleType",
    "UrgencyLevel",
    "UsageLog",
    "User",
    "UserConfig",
]
