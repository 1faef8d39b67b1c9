"""Application-wide constants for the PeerLearn platform."""

from __future__ import annotations

from decimal import Decimal

# Coin amounts are stored with two decimal places
COIN_QUANTUM = Decimal("0.01")

# Review rating bounds
MIN_RATING = 1
MAX_RATING = 5

# Text constraints
MAX_SKILL_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 1000
MAX_REVIEW_COMMENT_LENGTH = 500

# Query limits
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

DAYS_OF_WEEK = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

SERVICE_NAME = "peerlearn-api"
API_VERSION = "1.0.0"
API_TITLE = "PeerLearn API"
API_DESCRIPTION = "Session booking and coin wallet service for the PeerLearn skill exchange"
