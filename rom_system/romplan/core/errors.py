"""
Failure taxonomy for the plan pipeline.

Everything raised inside the generation chain is caught by the
orchestrator and turned into a fallback plan + diagnostic string.
PersistenceFailure is the exception: it reaches the caller.
"""


class PlanPipelineError(RuntimeError):
    pass


class InputInvalid(PlanPipelineError):
    pass


class BackendUnavailable(PlanPipelineError):
    pass


class BackendTimeout(BackendUnavailable):
    pass


class NoJsonFound(PlanPipelineError):
    pass


class MalformedJson(PlanPipelineError, ValueError):
    pass


class SchemaViolation(PlanPipelineError, ValueError):
    pass


class PersistenceFailure(PlanPipelineError):
    pass


def describe(exc: BaseException) -> str:
    """Diagnostic string stored next to a fallback plan."""
    msg = str(exc).strip()
    name = type(exc).__name__
    return f"{name}: {msg}" if msg else name
