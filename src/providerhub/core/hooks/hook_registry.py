"""Hook registry - configuration event registration and dispatch.

The store triggers an event after every committed mutation; listeners such
as the status aggregator's cache invalidation subscribe here. Listener
failures are logged and never undo the mutation that triggered them.
"""

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from providerhub.core.logging import get_logger
from providerhub.domain.entities.hook_context import HookContext, HookResult

logger = get_logger(__name__)


@dataclass
class RegisteredHook:
    """Internal representation of a registered hook.

    Attributes:
        id: Unique identifier for this hook registration.
        event: The event this hook is registered for.
        callback: Function called as callback(event, data, context).
        filters: Tag-based filters (e.g., {"family": "calendar"}).
        priority: Execution priority (higher = earlier).
        registration_order: Order in which this hook was registered.
    """

    id: str
    event: str
    callback: Callable
    filters: dict[str, Any] = field(default_factory=dict)
    priority: int = 0
    registration_order: int = 0


class HookRegistry:
    """Central hook registration and execution engine.

    Example:
        registry = HookRegistry()

        hook_id = registry.register(
            event=HookEvent.ON_CONFIGURATION_AFTER_UPSERT,
            callback=on_saved,
            filters={"family": "backup_storage"},
        )

        await registry.trigger(
            event=HookEvent.ON_CONFIGURATION_AFTER_UPSERT,
            data={"state": "configured"},
            context=HookContext(family="backup_storage", provider_id="s3"),
            filters={"family": "backup_storage"},
        )
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[RegisteredHook]] = {}
        self._registration_counter: int = 0
        self._hook_map: dict[str, RegisteredHook] = {}  # hook_id -> hook

    def register(
        self,
        event: str,
        callback: Callable,
        filters: Optional[dict[str, Any]] = None,
        priority: int = 0,
    ) -> str:
        """Register a hook for an event.

        Args:
            event: Hook event name.
            callback: Sync or async callable accepting (event, data, context).
            filters: Optional tag-based filters. Hook only fires if all
                filter conditions match the trigger filters.
            priority: Execution priority. Higher priority hooks run first.

        Returns:
            Unique hook_id string for later removal.
        """
        hook_id = f"hook_{uuid.uuid4().hex[:12]}"

        # FIFO ordering within same priority
        self._registration_counter += 1

        hook = RegisteredHook(
            id=hook_id,
            event=event,
            callback=callback,
            filters=filters or {},
            priority=priority,
            registration_order=self._registration_counter,
        )

        self._hooks.setdefault(event, []).append(hook)
        self._hook_map[hook_id] = hook

        logger.debug(
            "Hook registered",
            hook_id=hook_id,
            hook_event=event,
            priority=priority,
            filters=filters,
        )

        return hook_id

    def unregister(self, hook_id: str) -> bool:
        """Remove a registered hook.

        Args:
            hook_id: The unique ID returned from register().

        Returns:
            True if hook was removed, False if not found.
        """
        hook = self._hook_map.pop(hook_id, None)
        if not hook:
            logger.warning("Hook not found for unregister", hook_id=hook_id)
            return False

        remaining = [h for h in self._hooks.get(hook.event, []) if h.id != hook_id]
        if remaining:
            self._hooks[hook.event] = remaining
        else:
            self._hooks.pop(hook.event, None)

        logger.debug("Hook unregistered", hook_id=hook_id, hook_event=hook.event)
        return True

    async def trigger(
        self,
        event: str,
        data: Optional[dict[str, Any]] = None,
        context: Optional[HookContext] = None,
        filters: Optional[dict[str, Any]] = None,
    ) -> HookResult:
        """Execute all registered hooks for an event.

        Hooks are executed in priority order (higher priority first).
        Hooks with the same priority execute in registration order (FIFO).

        Args:
            event: Hook event name.
            data: Event payload passed to every hook.
            context: HookContext describing the affected configuration.
            filters: Trigger-time filters. Only hooks matching these
                filters will be executed.

        Returns:
            HookResult with success status and any errors.
        """
        result = HookResult(success=True, data=data)

        matching_hooks = self._filter_hooks(self._hooks.get(event, []), filters)
        if not matching_hooks:
            return result

        sorted_hooks = sorted(
            matching_hooks,
            key=lambda h: (-h.priority, h.registration_order),
        )

        logger.debug(
            "Triggering hooks",
            hook_event=event,
            hook_count=len(sorted_hooks),
            filters=filters,
        )

        for hook in sorted_hooks:
            try:
                outcome = hook.callback(event, data, context)
                if asyncio.iscoroutine(outcome):
                    await outcome
            except Exception as e:
                logger.error(
                    "Hook execution failed",
                    hook_id=hook.id,
                    hook_event=event,
                    error=str(e),
                )
                result.success = False
                result.errors.append(f"Hook {hook.id} failed: {str(e)}")

        return result

    def _filter_hooks(
        self,
        hooks: list[RegisteredHook],
        filters: Optional[dict[str, Any]],
    ) -> list[RegisteredHook]:
        """Filter hooks based on trigger filters.

        A hook matches if it has no filters, or all its filter keys are
        present in the trigger filters with equal values.
        """
        if not filters:
            return list(hooks)

        return [
            hook
            for hook in hooks
            if all(filters.get(key) == value for key, value in hook.filters.items())
        ]

    def get_hooks_for_event(self, event: str) -> list[RegisteredHook]:
        """Get all hooks registered for an event."""
        return self._hooks.get(event, []).copy()

    def clear(self) -> int:
        """Remove all registered hooks.

        Returns:
            Number of hooks removed.
        """
        count = len(self._hook_map)
        self._hooks.clear()
        self._hook_map.clear()
        logger.debug("Hooks cleared", count=count)
        return count
