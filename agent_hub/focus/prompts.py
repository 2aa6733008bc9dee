from datetime import datetime

from agent_hub.core.models.enums import BriefingScope
from agent_hub.focus.types import CollectedData

MAX_FIELD_CHARS = 200

LANGUAGE_NAMES = {
    "en": "English",
    "pt": "Portuguese",
    "es": "Spanish",
    "ru": "Russian",
}

SYSTEM_PROMPT = """You are an executive assistant specialised in prioritisation and time management.
You analyse emails, tasks, payments, legal documents and commercial opportunities so the user can focus on what really matters.

ALWAYS reply with valid JSON using exactly this structure:
{
  "briefingText": "Executive briefing text...",
  "keyHighlights": ["Highlight 1", "Highlight 2"],
  "items": [
    {
      "id": 123,
      "type": "email|task|financial|legal|commercial",
      "title": "Short title",
      "description": "Short description",
      "urgencyScore": 85,
      "urgencyLevel": "critical|high|medium|low",
      "urgencyReason": "Why it is urgent"
    }
  ]
}

urgencyScore rules:
- 90-100: critical (due today, critical risk, very high value)
- 70-89: high (due in 1-2 days, high risk, VIP stakeholder)
- 40-69: medium (due this week, medium risk)
- 0-39: low (no urgent deadline, low risk)

Return every item you were given, using its exact id and type.
Be direct, practical and focused on concrete actions."""


def truncate(text: str | None, limit: int = MAX_FIELD_CHARS) -> str:
    if not text:
        return ""
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 3] + "..."


def format_amount(cents: int | None, currency: str) -> str:
    if cents is None:
        return "n/a"
    return f"{currency} {cents / 100:,.2f}"


def _date(value: datetime | None) -> str:
    return value.date().isoformat() if value else ""


def build_prompt(
    data: CollectedData,
    scope: BriefingScope,
    now: datetime,
    *,
    language: str = "en",
    currency: str = "BRL",
    high_value_threshold: int = 500_000,
    urgent_days_threshold: int = 3,
) -> str:
    """Render every candidate with bounded-length fields plus scoring instructions."""
    horizon = "TODAY" if BriefingScope(scope) == BriefingScope.today else "THIS WEEK"
    lines = [
        f"Current date: {now.strftime('%A, %d %B %Y')}",
        f"Analysis scope: {horizon}",
        "",
        "=== DATA TO ANALYSE ===",
        "",
    ]

    if data.emails:
        lines.append(f"PENDING EMAILS ({len(data.emails)}):")
        for i, email in enumerate(data.emails, 1):
            sender = email.from_name or email.from_email
            lines.append(f"{i}. [ID:{email.id}] From: {truncate(sender)}{' (VIP)' if email.is_vip else ''}")
            lines.append(f"   Subject: {truncate(email.subject)}")
            lines.append(f"   Priority: {email.priority} | Action: {email.action}")
            if email.deadline:
                lines.append(f"   Mentioned deadline: {truncate(email.deadline)}")
            if email.email_date:
                lines.append(f"   Date: {_date(email.email_date)}")
            lines.append("")

    if data.tasks:
        lines.append(f"PENDING TASKS ({len(data.tasks)}):")
        for i, task in enumerate(data.tasks, 1):
            company = f" ({task.stakeholder_company})" if task.stakeholder_company else ""
            lines.append(f"{i}. [ID:{task.id}] {truncate(task.title)}")
            lines.append(f"   Description: {truncate(task.description)}")
            lines.append(f"   Stakeholder: {truncate(task.stakeholder_name)}{company}")
            lines.append(
                f"   Importance: {task.stakeholder_importance or 'unknown'} | Priority: {task.priority}"
            )
            if task.deadline_date:
                lines.append(f"   Deadline: {_date(task.deadline_date)}")
            if task.email_subject:
                lines.append(f"   Source: {truncate(task.email_subject)}")
            lines.append("")

    if data.financial_items:
        lines.append(f"FINANCIAL ITEMS ({len(data.financial_items)}):")
        for i, item in enumerate(data.financial_items, 1):
            lines.append(f"{i}. [ID:{item.id}] {item.type.upper()}: {truncate(item.description)}")
            lines.append(f"   Creditor: {truncate(item.creditor)}")
            lines.append(f"   Amount: {format_amount(item.amount, currency)}")
            if item.due_date:
                lines.append(f"   Due: {_date(item.due_date)}")
            lines.append(f"   Status: {item.status} | Priority: {item.priority or 'normal'}")
            if item.requires_approval:
                lines.append("   REQUIRES APPROVAL")
            lines.append("")

    if data.legal_items:
        lines.append(f"LEGAL DOCUMENTS ({len(data.legal_items)}):")
        for i, item in enumerate(data.legal_items, 1):
            lines.append(f"{i}. [ID:{item.id}] {truncate(item.document_name)}")
            lines.append(f"   Type: {item.document_type or 'unspecified'}")
            lines.append(f"   Risk: {item.overall_risk.upper()}")
            if item.required_action:
                lines.append(f"   Required action: {truncate(item.required_action)}")
            if item.action_deadline:
                lines.append(f"   Deadline: {truncate(item.action_deadline)}")
            if item.is_urgent:
                lines.append("   URGENT")
            lines.append("")

    if data.commercial_items:
        lines.append(f"COMMERCIAL OPPORTUNITIES ({len(data.commercial_items)}):")
        for i, item in enumerate(data.commercial_items, 1):
            client = item.company_name or item.contact_name or "Client"
            lines.append(f"{i}. [ID:{item.id}] {item.type}: {truncate(client)}")
            if item.product_service:
                lines.append(f"   Products/services: {truncate(item.product_service)}")
            if item.requested_amount:
                lines.append(
                    f"   Value: {format_amount(item.requested_amount, item.currency or currency)}"
                )
            if item.deadline:
                lines.append(f"   Deadline: {_date(item.deadline)}")
            lines.append(f"   Status: {item.status} | Priority: {item.priority or 'normal'}")
            if item.suggested_action:
                lines.append(f"   Suggested action: {truncate(item.suggested_action)}")
            lines.append("")

    lang = LANGUAGE_NAMES.get(language, language)
    lines += [
        "=== INSTRUCTIONS ===",
        "Analyse every item above and produce:",
        f"1. An executive briefing in {lang} (at most 3 paragraphs)",
        "2. 3-5 key highlights (short sentences)",
        "3. Every item with an urgency score (0-100) and level (critical/high/medium/low)",
        "",
        "Consider for urgency:",
        f"- Deadlines falling {'TODAY' if horizon == 'TODAY' else 'this week'}",
        f"- Deadlines within {urgent_days_threshold} days",
        f"- Amounts above {format_amount(high_value_threshold, currency)}",
        "- High or critical risk contracts",
        "- VIP or high-importance stakeholders",
        "- Items that require approval",
        "",
        "Reply ONLY with valid JSON in the specified format.",
    ]
    return "\n".join(lines)
