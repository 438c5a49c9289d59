"""
Ad / monetization collaborator interface.
NO UI DEPENDENCIES.

The game runs fine without a provider: relief is granted directly and
interstitial requests are only surfaced as events.
"""
from abc import ABC, abstractmethod
from typing import Callable


class AdProvider(ABC):
    """Something that can show ads on the game's behalf."""

    @abstractmethod
    def show_interstitial(self) -> None:
        """Show a between-levels interstitial. Fire and forget."""
        pass

    @abstractmethod
    def show_rewarded(self, on_reward: Callable[[], None]) -> None:
        """
        Show a rewarded ad.
        `on_reward` must be called once the reward is earned; it may be
        called later from the frame loop, never from another thread.
        """
        pass


class InstantAdProvider(AdProvider):
    """
    Provider that rewards immediately and counts what it was asked to do.
    Used for local play and in tests.
    """

    def __init__(self):
        self.interstitials_shown = 0
        self.rewarded_shown = 0

    def show_interstitial(self) -> None:
        self.interstitials_shown += 1

    def show_rewarded(self, on_reward: Callable[[], None]) -> None:
        self.rewarded_shown += 1
        on_reward()
