from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

from .units import Unit


@dataclass
class BattleState:
    """Attackers, in attack order, against a single defender."""

    attackers: List[Unit]
    defender: Unit

    def copy(self) -> "BattleState":
        return BattleState(
            attackers=[a.copy() for a in self.attackers],
            defender=self.defender.copy(),
        )

    def reordered(self, order: List[int]) -> "BattleState":
        """Clone the units into a new state with attackers in ``order``."""
        return BattleState(
            attackers=[self.attackers[idx].copy() for idx in order],
            defender=self.defender.copy(),
        )

    def count_dead(self) -> int:
        return sum(1 for a in self.attackers if not a.alive())

    def to_dict(self) -> Dict[str, Any]:
        # Defender health is reported as a whole number, truncated toward zero.
        return {
            "attackers": [a.health for a in self.attackers],
            "defender": {
                "health": int(self.defender.health),
                "frozen": self.defender.frozen,
                "converted": self.defender.converted,
            },
        }
