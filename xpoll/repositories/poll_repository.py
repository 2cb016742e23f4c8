import logging
from typing import List, Optional, Sequence
import psycopg
import pydantic

from xpoll.database.connection import DatabaseManager
from xpoll.database.errors import ValidationError, wrap_database_error
from xpoll.models.Poll import Poll, Choice
from xpoll.models.poll_models import PollCreate

logger = logging.getLogger(__name__)


class PollRepository:
    """Repository for poll and choice database operations."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    def create_poll(self, owner_id: int, question: str, choice_texts: Sequence[str]) -> Poll:
        """
        Create a poll together with all of its choices.

        The poll row and every choice row are written in one transaction:
        either all of them are persisted or none are.

        Args:
            owner_id (int): ID of the user creating the poll
            question (str): The poll question
            choice_texts (Sequence[str]): Choice texts, in display order

        Returns:
            Poll: Created poll with generated ids for itself and each choice,
            choices in the same order as choice_texts

        Raises:
            ValidationError: If choice_texts is empty, a text is blank, or owner_id is unknown
            StoreConnectionError: If the database is unreachable
            PersistenceError: For other database errors
        """
        try:
            request = PollCreate(owner_id=owner_id, question=question, choices=choice_texts)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid poll: {e}") from e

        try:
            with self.db.transaction() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(
                        """INSERT INTO polls (user_id, question)
                        VALUES (%s, %s) RETURNING id, is_closed, created_at""",
                        (request.owner_id, request.question),
                    )
                    poll_id, is_closed, created_at = cursor.fetchone()

                    choices: List[Choice] = []
                    for display_order, text in enumerate(request.choices):
                        cursor.execute(
                            """INSERT INTO choices (poll_id, choice_text, display_order)
                            VALUES (%s, %s, %s) RETURNING id""",
                            (poll_id, text, display_order),
                        )
                        choices.append(Choice(choice_id=cursor.fetchone()[0], poll_id=poll_id, text=text))
        except psycopg.Error as e:
            raise wrap_database_error("create_poll", e, owner_id=owner_id) from e

        logger.info(f"Poll created: poll={poll_id}, owner={owner_id}, choices={len(choices)}")
        return Poll(
            poll_id=poll_id,
            owner_id=request.owner_id,
            question=request.question,
            choices=choices,
            is_closed=is_closed,
            created_at=created_at,
        )

    def get_poll(self, poll_id: int) -> Optional[Poll]:
        """
        Get a poll by ID with its choices.

        Choices carry their stored ids and come back in creation order.

        Returns:
            Optional[Poll]: Poll if found, None if no poll has that id
        """
        try:
            with self.db.acquire() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(
                        """SELECT id, user_id, question, is_closed, created_at
                        FROM polls WHERE id = %s""",
                        (poll_id,),
                    )
                    poll_row = cursor.fetchone()
                    if poll_row is None:
                        return None

                    cursor.execute(
                        """SELECT id, poll_id, choice_text
                        FROM choices WHERE poll_id = %s
                        ORDER BY display_order, id""",
                        (poll_id,),
                    )
                    choice_rows = cursor.fetchall()
        except psycopg.Error as e:
            raise wrap_database_error("get_poll", e, poll_id=poll_id) from e

        return Poll.from_db_row(poll_row, [Choice.from_db_row(row) for row in choice_rows])

    def close_poll(self, poll_id: int) -> None:
        """
        Close a poll for voting. Closing is one-way.

        Closing an already-closed or non-existent poll is not an error.
        """
        try:
            with self.db.transaction() as conn:
                with conn.cursor() as cursor:
                    cursor.execute("UPDATE polls SET is_closed = TRUE WHERE id = %s", (poll_id,))
                    affected = cursor.rowcount
        except psycopg.Error as e:
            raise wrap_database_error("close_poll", e, poll_id=poll_id) from e

        if affected == 0:
            logger.info(f"Close poll - no poll with id {poll_id}")
        else:
            logger.info(f"Poll closed: poll={poll_id}")
