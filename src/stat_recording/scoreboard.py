"""
Scoreboard

Team scores recomputed from the recorded stats: made field goal 2, made
three-pointer 3, made free throw 1. Recomputation from the gateway's full
stat list keeps the score correct after undo and failed writes.
"""

from typing import Dict, Iterable, Optional

from .stat_event import GameContext, StatEvent


class Scoreboard:
    """
    Current score for the two teams of a tracked game.
    """

    def __init__(self, context: GameContext):
        """
        Initialize scoreboard for the game's two teams

        Args:
            context: Game being tracked
        """
        self.context = context
        self.scores: Dict[str, int] = {
            context.team_a_id: 0,
            context.team_b_id: 0,
        }

    def recompute(self, stats: Iterable[StatEvent]) -> Dict[str, int]:
        """
        Rebuild scores from the full list of recorded stats.

        Stats for teams outside this game are ignored.

        Returns:
            Dictionary mapping team_id to score
        """
        scores = {team_id: 0 for team_id in self.scores}
        for stat in stats:
            if stat.team_id in scores:
                scores[stat.team_id] += stat.points
        self.scores = scores
        return self.get_score()

    def apply(self, stat: StatEvent) -> None:
        """Add a single stat's points, for optimistic display between recomputes."""
        if stat.team_id in self.scores:
            self.scores[stat.team_id] += stat.points

    def retract(self, stat: StatEvent) -> None:
        """Take back an optimistically applied stat that never reached the store."""
        if stat.team_id in self.scores:
            self.scores[stat.team_id] = max(0, self.scores[stat.team_id] - stat.points)

    def get_score(self) -> Dict[str, int]:
        return self.scores.copy()

    @property
    def team_a_score(self) -> int:
        return self.scores[self.context.team_a_id]

    @property
    def team_b_score(self) -> int:
        return self.scores[self.context.team_b_id]

    def is_tied(self) -> bool:
        """
        Check if the game is currently tied

        Returns:
            True if both teams have the same score
        """
        return self.team_a_score == self.team_b_score

    def get_leading_team(self) -> Optional[str]:
        """
        Get the team ID of the currently leading team

        Returns:
            Team ID of leading team, or None if tied
        """
        if self.is_tied():
            return None
        return max(self.scores, key=lambda team: self.scores[team])

    def __str__(self) -> str:
        return f"{self.context.team_a_id} {self.team_a_score} - {self.team_b_score} {self.context.team_b_id}"
