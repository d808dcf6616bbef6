"""Duel domain services: lobby, matchmaking, rounds and timers.

Components here mutate in-memory state and return outbound messages;
they never talk to the transport. The Socket.IO gateway dispatches the
returned messages, keeping transport concerns separated from core duel
mechanics.
"""
