"""
Tests for the summary aggregator.
"""

import psycopg
import pytest

from xpoll.database.errors import PersistenceError
from xpoll.repositories.summary_aggregator import SUMMARY_QUERY, SummaryAggregator


def test_summary_query_keeps_zero_vote_choices():
    assert "LEFT JOIN responses" in SUMMARY_QUERY
    assert "COUNT(r.choice_id)" in SUMMARY_QUERY


def test_get_poll_summaries_one_row_per_choice(mock_db, mock_cursor):
    mock_cursor.fetchall.return_value = [
        (1, "Best pet?", "Cat", 2),
        (2, "Best pet?", "Dog", 0),
        (3, "Best pet?", "Fish", 1),
    ]

    summaries = SummaryAggregator(mock_db).get_poll_summaries(10)

    assert [s.choice_text for s in summaries] == ["Cat", "Dog", "Fish"]
    assert [s.response_count for s in summaries] == [2, 0, 1]
    assert all(s.question == "Best pet?" for s in summaries)
    assert mock_cursor.execute.call_args.args[1] == (10,)


def test_get_poll_summaries_empty_for_unknown_poll(mock_db, mock_cursor):
    mock_cursor.fetchall.return_value = []
    assert SummaryAggregator(mock_db).get_poll_summaries(404) == []


def test_get_poll_summaries_wraps_database_error(mock_db, mock_cursor):
    mock_cursor.execute.side_effect = psycopg.errors.InternalError("relation broken")

    with pytest.raises(PersistenceError) as exc_info:
        SummaryAggregator(mock_db).get_poll_summaries(10)

    assert exc_info.value.context == {"poll_id": 10}


def test_get_poll_results_percentages(mock_db, mock_cursor):
    mock_cursor.fetchone.return_value = (10, "Best pet?", False)
    mock_cursor.fetchall.return_value = [
        (1, "Best pet?", "Cat", 2),
        (2, "Best pet?", "Dog", 0),
        (3, "Best pet?", "Fish", 1),
    ]

    results = SummaryAggregator(mock_db).get_poll_results(10)

    assert results.total_votes == 3
    assert [o.percentage for o in results.options] == [66.7, 0.0, 33.3]
    assert [o.choice_id for o in results.options] == [1, 2, 3]


def test_get_poll_results_no_votes(mock_db, mock_cursor):
    mock_cursor.fetchone.return_value = (10, "Best pet?", True)
    mock_cursor.fetchall.return_value = [(1, "Best pet?", "Cat", 0), (2, "Best pet?", "Dog", 0)]

    results = SummaryAggregator(mock_db).get_poll_results(10)

    assert results.total_votes == 0
    assert results.is_closed is True
    assert [o.percentage for o in results.options] == [0.0, 0.0]


def test_get_poll_results_missing_poll(mock_db, mock_cursor):
    mock_cursor.fetchone.return_value = None
    assert SummaryAggregator(mock_db).get_poll_results(404) is None
