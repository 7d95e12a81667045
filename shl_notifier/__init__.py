"""SHL live game poller: derives game events and pushes notifications."""
