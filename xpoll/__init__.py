"""Poll lifecycle and vote-tally storage core for XPoll."""

__version__ = "0.1.0"
