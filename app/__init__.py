"""Tetrachord duel game server.

Kept as a plain FastAPI app: the game rules live in `turn_processing`, `fsm`
and `actions`; matchmaking and timers in `session_manager`.
"""
