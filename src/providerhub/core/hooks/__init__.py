"""Configuration event hooks.

Example usage:
    from providerhub.core.hooks import HookRegistry, HookEvent

    registry = HookRegistry()

    async def on_saved(event, data, context):
        logger.info("saved", provider=context.provider_id)

    registry.register(HookEvent.ON_CONFIGURATION_AFTER_UPSERT, on_saved)
"""

from providerhub.core.hooks.hook_events import (
    CONFIGURATION_EVENTS,
    HookEvent,
)
from providerhub.core.hooks.hook_registry import HookRegistry, RegisteredHook

__all__ = [
    "HookRegistry",
    "RegisteredHook",
    "HookEvent",
    "CONFIGURATION_EVENTS",
]
