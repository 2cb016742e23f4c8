"""Repositories over the shared storage gateway."""

from .user_repository import UserRepository
from .poll_repository import PollRepository
from .response_repository import ResponseRepository
from .summary_aggregator import SummaryAggregator
