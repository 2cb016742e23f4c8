import logging
from typing import List, Optional
import psycopg

from xpoll.database.connection import DatabaseManager
from xpoll.database.errors import wrap_database_error
from xpoll.models.PollSummary import PollSummary
from xpoll.models.poll_models import PollResultOption, PollResults

logger = logging.getLogger(__name__)

# LEFT JOIN keeps choices nobody voted for; COUNT(r.choice_id) is 0 for them.
SUMMARY_QUERY = """
    SELECT c.id, p.question, c.choice_text, COUNT(r.choice_id) AS response_count
    FROM polls p
    JOIN choices c ON c.poll_id = p.id
    LEFT JOIN responses r ON r.choice_id = c.id AND r.poll_id = p.id
    WHERE p.id = %s
    GROUP BY c.id, p.question, c.choice_text, c.display_order
    ORDER BY c.display_order, c.id
"""


class SummaryAggregator:
    """Computes per-choice vote tallies for a poll."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    def get_poll_summaries(self, poll_id: int) -> List[PollSummary]:
        """
        Count responses for every choice of a poll, including zero-vote choices.

        Args:
            poll_id (int): ID of the poll

        Returns:
            List[PollSummary]: One summary per choice in creation order; empty
            if the poll does not exist or has no choices

        Raises:
            StoreConnectionError: If the database is unreachable
            PersistenceError: For other database errors
        """
        try:
            with self.db.acquire() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(SUMMARY_QUERY, (poll_id,))
                    rows = cursor.fetchall()
        except psycopg.Error as e:
            raise wrap_database_error("get_poll_summaries", e, poll_id=poll_id) from e

        return [PollSummary.from_db_row(row) for row in rows]

    def get_poll_results(self, poll_id: int) -> Optional[PollResults]:
        """
        Get poll results with vote counts and percentages.

        Percentages are rounded to one decimal and are all 0.0 when no
        votes have been cast. The poll row and the tallies are read on the
        same connection.

        Returns:
            Optional[PollResults]: Results, or None if the poll does not exist
        """
        try:
            with self.db.acquire() as conn:
                with conn.cursor() as cursor:
                    cursor.execute("SELECT id, question, is_closed FROM polls WHERE id = %s", (poll_id,))
                    poll_row = cursor.fetchone()
                    if poll_row is None:
                        return None
                    cursor.execute(SUMMARY_QUERY, (poll_id,))
                    rows = cursor.fetchall()
        except psycopg.Error as e:
            raise wrap_database_error("get_poll_results", e, poll_id=poll_id) from e

        summaries = [PollSummary.from_db_row(row) for row in rows]
        total_votes = sum(summary.response_count for summary in summaries)

        options = []
        for summary in summaries:
            if total_votes == 0:
                percentage = 0.0
            else:
                percentage = round((summary.response_count / total_votes) * 100, 1)
            options.append(PollResultOption(
                choice_id=summary.choice_id,
                choice_text=summary.choice_text,
                vote_count=summary.response_count,
                percentage=percentage
            ))

        logger.info(f"Poll results retrieved - poll: {poll_id}, total_votes: {total_votes}")
        return PollResults(
            poll_id=poll_row[0],
            question=poll_row[1],
            is_closed=poll_row[2],
            total_votes=total_votes,
            options=options
        )
