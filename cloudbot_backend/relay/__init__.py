"""
Relay operations: resolve a user's linked account, call Cloudinary, report an Outcome.
"""

from cloudbot_backend.relay.outcomes import Outcome, OutcomeKind

__all__ = [
    "Outcome",
    "OutcomeKind",
]
