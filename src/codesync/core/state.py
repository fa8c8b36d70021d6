"""Session state shared between the change watcher and the output printer."""

import threading


class EditState:
    """Whether any change has been observed since the session started.

    False until the first filesystem event, true for the rest of the
    session. It is never reset.
    """

    def __init__(self):
        self._edited = threading.Event()

    def mark(self):
        """Record that a change occurred."""
        self._edited.set()

    @property
    def edited(self) -> bool:
        return self._edited.is_set()

    def __bool__(self) -> bool:
        return self.edited

    def __repr__(self) -> str:
        return f"EditState(edited={self.edited})"
