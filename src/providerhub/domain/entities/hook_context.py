"""Hook context and result for the configuration event hooks.

- HookContext: Context passed to all hook callbacks
- HookResult: Result of a hook trigger operation
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class HookContext:
    """Context passed to all hook callbacks.

    Attributes:
        family: Provider family the event concerns.
        provider_id: Provider key the event concerns.
        owner_scope: Owner scope of the affected configuration (None = global).
        request_id: Correlation ID for logging and tracing.
    """

    family: str
    provider_id: str
    owner_scope: Optional[str] = None
    request_id: str = ""

    def __post_init__(self) -> None:
        if not self.request_id:
            self.request_id = f"hk_{uuid.uuid4().hex[:12]}"


@dataclass
class HookResult:
    """Result of a hook trigger operation.

    Attributes:
        success: Whether all hooks executed successfully.
        errors: List of error messages from hooks that failed.
        data: Data passed through the hook chain.
    """

    success: bool = True
    errors: list[str] = field(default_factory=list)
    data: Optional[dict[str, Any]] = None
