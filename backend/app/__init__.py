"""PeerLearn booking and wallet API."""
