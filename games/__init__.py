"""
games — authenticated proxy to the RAWG game-data API.

Provides:
  • ``RawgClient`` — one upstream call per request, bounded by a timeout
  • ``/games`` and ``/games/{game_id}`` routes (pass-through JSON)
"""
