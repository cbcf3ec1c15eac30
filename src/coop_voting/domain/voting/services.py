"""
Voting Domain Services

Domain services containing the tally rules.
"""

from coop_voting.domain.voting.entities import Agenda, Tally
from coop_voting.domain.voting.value_objects import AgendaResult


class TallyEngine:
    """Pure vote-count arithmetic.

    Never raises domain errors and never touches storage: callers hand in
    counters that were already validated by the Agenda model.
    """

    @classmethod
    def compute_result(cls, yes_votes: int, no_votes: int, total_votes: int) -> AgendaResult:
        """Classify the outcome of a vote.

        Args:
            yes_votes: Number of YES votes.
            no_votes: Number of NO votes.
            total_votes: Total votes cast.

        Returns:
            UNVOTED when nobody voted, otherwise APPROVED, REJECTED or TIE.
        """
        if total_votes == 0:
            return AgendaResult.UNVOTED
        if yes_votes > no_votes:
            return AgendaResult.APPROVED
        if no_votes > yes_votes:
            return AgendaResult.REJECTED
        return AgendaResult.TIE

    @classmethod
    def percentage(cls, part: int, total_votes: int) -> int:
        """Share of ``part`` in ``total_votes`` rounded half-up to a whole point.

        Returns 0 when no votes were cast. Yes and no shares are rounded
        independently and may not add up to 100.
        """
        if total_votes <= 0:
            return 0
        # floor(100 * part / total + 1/2) in integer arithmetic
        return (200 * part + total_votes) // (2 * total_votes)

    @classmethod
    def tally(cls, agenda: Agenda) -> Tally:
        """Build the tally projection for an agenda snapshot."""
        return Tally(
            agenda_id=agenda.id,
            yes_votes=agenda.yes_votes,
            no_votes=agenda.no_votes,
            total_votes=agenda.total_votes,
            yes_percentage=cls.percentage(agenda.yes_votes, agenda.total_votes),
            no_percentage=cls.percentage(agenda.no_votes, agenda.total_votes),
            result=cls.compute_result(agenda.yes_votes, agenda.no_votes, agenda.total_votes),
            status=agenda.status,
        )
