"""In-memory map of entity id to the timers armed for it."""

from .clock import Clock, TimerHandle


class TimerRegistry:
    """Armed timers keyed by task or event id.

    Only ever touched from the event loop that runs the timers, so there is
    no lock. Holds at most one set of live timers per entity.
    """

    def __init__(self, clock: Clock):
        self._clock = clock
        self._timers: dict[str, list[TimerHandle]] = {}

    def arm(self, entity_id: str, handles: list[TimerHandle]) -> None:
        """Store handles for entity_id, cancelling any set it replaces."""
        self.cancel(entity_id)
        if handles:
            self._timers[entity_id] = list(handles)

    def cancel(self, entity_id: str) -> int:
        """Cancel and forget every timer for entity_id. Unknown ids are a no-op."""
        handles = self._timers.pop(entity_id, [])
        for handle in handles:
            self._clock.cancel(handle)
        return len(handles)

    def release(self, entity_id: str, handle: TimerHandle) -> None:
        """Forget a timer that has fired."""
        handles = self._timers.get(entity_id)
        if not handles or handle not in handles:
            return
        handles.remove(handle)
        if not handles:
            del self._timers[entity_id]

    def handles(self, entity_id: str) -> list[TimerHandle]:
        return list(self._timers.get(entity_id, []))

    def entity_ids(self) -> list[str]:
        return list(self._timers)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._timers

    def __len__(self) -> int:
        return len(self._timers)
