import enum


class AccountStatus(str, enum.Enum):
    pending = "pending"
    active = "active"
    suspended = "suspended"
    trial_expired = "trial_expired"


class AgentType(str, enum.Enum):
    email = "email"
    legal = "legal"
    financial = "financial"
    stablecoin = "stablecoin"
    focus = "focus"


class ScheduleType(str, enum.Enum):
    interval = "interval"
    manual = "manual"


class BriefingScope(str, enum.Enum):
    today = "today"
    week = "week"


class FocusItemType(str, enum.Enum):
    email = "email"
    task = "task"
    financial = "financial"
    legal = "legal"
    commercial = "commercial"


class UrgencyLevel(str, enum.Enum):
    critical = "critical"
    high = "high"
    medium = "medium"
    low = "low"


class AgentLogEvent(str, enum.Enum):
    completed = "completed"
    failed = "failed"
