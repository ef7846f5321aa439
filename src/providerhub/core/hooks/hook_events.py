"""Hook event definitions.

Adding new events is allowed (non-breaking), but removing or renaming
events is a breaking change for registered listeners.
"""


class HookEvent:
    """Hook event names.

    All events are after_* events: they fire once a configuration
    mutation has been committed.
    """

    ON_CONFIGURATION_AFTER_UPSERT = "on_configuration_after_upsert"
    ON_CONFIGURATION_AFTER_DELETE = "on_configuration_after_delete"
    ON_CONFIGURATION_AFTER_STATE_CHANGE = "on_configuration_after_state_change"


CONFIGURATION_EVENTS = [
    HookEvent.ON_CONFIGURATION_AFTER_UPSERT,
    HookEvent.ON_CONFIGURATION_AFTER_DELETE,
    HookEvent.ON_CONFIGURATION_AFTER_STATE_CHANGE,
]
