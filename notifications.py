from abc import ABC, abstractmethod


class Notifier(ABC):
    """Sink for short user-facing messages (the GUI shows them as pop-ups)."""

    @abstractmethod
    def success(self, message):
        pass

    @abstractmethod
    def error(self, message):
        pass
