"""Exception hierarchy for Agent Hub."""


class AgentHubError(Exception):
    """Base exception for all Agent Hub errors."""
    pass


class ConfigurationError(AgentHubError):
    """Missing or invalid per-user / per-agent wiring. Never retried."""
    pass


class UpstreamUnavailable(AgentHubError):
    """Generative backend unreachable or returned an error."""
    pass


class MalformedResponse(AgentHubError):
    """Generative backend replied, but the reply failed parsing or validation."""
    pass


class DataUnavailable(AgentHubError):
    """A domain store query failed."""
    pass


class PersistenceError(AgentHubError):
    """Writing to durable storage failed."""
    pass
