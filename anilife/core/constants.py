"""
Core constants used across the application. Keep these simple and documented.
"""

# Recommendations: size of the personalized row and of the cold-start row
RECOMMENDATION_LIMIT: int = 6
COLD_START_LIMIT: int = 8
# Only the most recent history entries contribute preferred genres
HISTORY_GENRE_WINDOW: int = 5

# Seed fixtures create at most this many episodes per title
SEED_EPISODES_PER_TITLE: int = 6
SEED_EPISODE_DURATION: str = "24:00"
