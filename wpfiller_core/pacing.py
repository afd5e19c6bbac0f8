#!/usr/bin/env python3
"""
Human-like pacing for interactive steps (login typing, pre-submit pauses).

Timing is kept out of the orchestration logic: components call
pacing.pause(kind) and pacing.keystroke_delay(); tests inject NoPacing.
"""

import asyncio
import random
from typing import Dict, Tuple

# kind -> (min_ms, max_ms)
HUMAN_PAUSES: Dict[str, Tuple[int, int]] = {
    "pre_action": (500, 1500),
    "focus": (200, 500),
    "between_fields": (200, 700),
    "pre_submit": (300, 800),
}
KEYSTROKE_RANGE_MS = (50, 100)


class Pacing:
    """Base pacing: no delays at all"""

    async def pause(self, kind: str) -> None:
        return None

    def keystroke_delay(self) -> float:
        return 0

    async def warm_up(self, page) -> None:
        return None


class NoPacing(Pacing):
    pass


class HumanPacing(Pacing):
    """Randomized pauses and typing speed"""

    def __init__(self, rng: random.Random = None):
        self.rng = rng or random.Random()

    async def pause(self, kind: str) -> None:
        low, high = HUMAN_PAUSES.get(kind, HUMAN_PAUSES["between_fields"])
        await asyncio.sleep(self.rng.uniform(low, high) / 1000.0)

    def keystroke_delay(self) -> float:
        return self.rng.uniform(*KEYSTROKE_RANGE_MS)

    async def warm_up(self, page) -> None:
        """A few random mouse movements before the first interaction"""
        viewport = page.viewport_size or {"width": 1920, "height": 1080}
        for _ in range(3):
            x = self.rng.random() * viewport["width"]
            y = self.rng.random() * viewport["height"]
            await page.mouse.move(x, y, steps=10)
            await asyncio.sleep(self.rng.uniform(100, 300) / 1000.0)


def pacing_for(config) -> Pacing:
    return HumanPacing() if config.human_pacing else NoPacing()
