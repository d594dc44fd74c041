"""Error kinds raised by the copy-function engine.

All of them derive from :class:`ValueError` so callers that already treat bad
input as ``ValueError`` (the HTTP routers, for instance) keep working.
"""


class CopyFunctionError(ValueError):
    """Base class for every failure surfaced by the engine."""


class InvalidFormat(CopyFunctionError):
    """The source text is not a ``(page) => { ... }`` function literal."""


class MissingReturn(CopyFunctionError):
    """The function body has no ``return { ... }`` object literal."""


class UnknownTemplate(CopyFunctionError):
    """A template id does not name any catalog entry."""

    def __init__(self, template_id: str):
        super().__init__(f"Unknown template function: {template_id}")
        self.template_id = template_id


class NoExecutableFunction(CopyFunctionError):
    """A copy function has neither usable code nor a template id."""


class ExecutionFailed(CopyFunctionError):
    """Wraps an engine error raised while dispatching a copy function.

    The inner exception is kept on :attr:`reason` for diagnostics.
    """

    def __init__(self, reason: Exception):
        super().__init__(f"Failed to execute function: {reason}")
        self.reason = reason
