import logging
from typing import List, Optional
import psycopg
import pydantic

from xpoll.database.connection import DatabaseManager
from xpoll.database.errors import (
    DuplicateResponseError,
    InvalidChoiceError,
    PollClosedError,
    UnknownPollError,
    ValidationError,
    constraint_name,
    wrap_database_error,
)
from xpoll.models.Response import Response
from xpoll.models.response_models import ResponseCreate

logger = logging.getLogger(__name__)


class ResponseRepository:
    """Records votes, one per user per poll."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    def create_response(self, poll_id: int, choice_id: int, user_id: int) -> Response:
        """
        Record a user's vote for a choice in a poll.

        Validation and insert run in one transaction. The poll row is locked
        FOR SHARE so it cannot be closed between the check and the insert;
        concurrent voters on the same poll do not block each other. The
        unique_response_poll_user constraint catches two concurrent votes
        from the same user that both pass the duplicate check.

        Args:
            poll_id (int): ID of the poll being voted on
            choice_id (int): ID of the selected choice
            user_id (int): ID of the user casting the vote

        Returns:
            Response: The recorded response

        Raises:
            UnknownPollError: If the poll does not exist
            PollClosedError: If the poll is closed
            InvalidChoiceError: If the choice doesn't belong to the poll
            DuplicateResponseError: If the user has already voted on this poll
            ValidationError: For malformed ids or an unknown user
            StoreConnectionError: If the database is unreachable
            PersistenceError: For other database errors
        """
        try:
            ResponseCreate(poll_id=poll_id, choice_id=choice_id, user_id=user_id)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid response: {e}") from e

        try:
            with self.db.transaction() as conn:
                with conn.cursor() as cursor:
                    cursor.execute("SELECT is_closed FROM polls WHERE id = %s FOR SHARE", (poll_id,))
                    poll_row = cursor.fetchone()
                    if poll_row is None:
                        raise UnknownPollError(f"Poll with ID {poll_id} does not exist")
                    if poll_row[0]:
                        raise PollClosedError(f"Poll {poll_id} is closed")

                    cursor.execute(
                        "SELECT id FROM choices WHERE id = %s AND poll_id = %s",
                        (choice_id, poll_id),
                    )
                    if cursor.fetchone() is None:
                        raise InvalidChoiceError(f"Choice {choice_id} does not belong to poll {poll_id}")

                    cursor.execute(
                        "SELECT choice_id FROM responses WHERE poll_id = %s AND user_id = %s",
                        (poll_id, user_id),
                    )
                    if cursor.fetchone() is not None:
                        raise DuplicateResponseError(f"User {user_id} has already voted on poll {poll_id}")

                    cursor.execute(
                        """INSERT INTO responses (poll_id, choice_id, user_id)
                        VALUES (%s, %s, %s) RETURNING responded_at""",
                        (poll_id, choice_id, user_id),
                    )
                    responded_at = cursor.fetchone()[0]
        except DuplicateResponseError:
            logger.warning(f"Duplicate vote attempt: user={user_id}, poll={poll_id}")
            raise
        except psycopg.errors.UniqueViolation as e:
            if "unique_response_poll_user" not in constraint_name(e):
                raise wrap_database_error("create_response", e, poll_id=poll_id, user_id=user_id) from e
            logger.warning(f"Duplicate vote attempt: user={user_id}, poll={poll_id}")
            raise DuplicateResponseError(f"User {user_id} has already voted on poll {poll_id}") from e
        except psycopg.Error as e:
            raise wrap_database_error(
                "create_response", e, poll_id=poll_id, choice_id=choice_id, user_id=user_id
            ) from e

        logger.info(f"Vote created: user={user_id}, poll={poll_id}, choice={choice_id}")
        return Response(poll_id=poll_id, choice_id=choice_id, user_id=user_id, responded_at=responded_at)

    def get_user_response(self, poll_id: int, user_id: int) -> Optional[Response]:
        """
        Retrieve a user's vote for a specific poll.

        Returns:
            Optional[Response]: Response if the user has voted, None otherwise
        """
        try:
            with self.db.acquire() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(
                        """SELECT poll_id, choice_id, user_id, responded_at
                        FROM responses WHERE poll_id = %s AND user_id = %s""",
                        (poll_id, user_id),
                    )
                    row = cursor.fetchone()
        except psycopg.Error as e:
            raise wrap_database_error("get_user_response", e, poll_id=poll_id, user_id=user_id) from e

        if row is None:
            return None
        return Response.from_db_row(row)

    def get_responses_by_poll(self, poll_id: int) -> List[Response]:
        """
        Retrieve all votes for a specific poll, oldest first.
        """
        try:
            with self.db.acquire() as conn:
                with conn.cursor() as cursor:
                    cursor.execute(
                        """SELECT poll_id, choice_id, user_id, responded_at
                        FROM responses WHERE poll_id = %s
                        ORDER BY responded_at ASC""",
                        (poll_id,),
                    )
                    rows = cursor.fetchall()
        except psycopg.Error as e:
            raise wrap_database_error("get_responses_by_poll", e, poll_id=poll_id) from e

        return [Response.from_db_row(row) for row in rows]
