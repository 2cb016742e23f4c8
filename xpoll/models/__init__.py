"""Shared models for the xpoll storage core."""

from .User import User
from .Poll import Poll, Choice
from .Response import Response
from .PollSummary import PollSummary
from .auth_models import UserCreate, CredentialCheck
from .poll_models import PollCreate, PollResultOption, PollResults
from .response_models import ResponseCreate
