"""
Tasks - runnable entry points.

    python -m tasks.fear_greed [--cron]
    python -m tasks.altcoin_season_score [--cron]
    python -m tasks.news_monitor [--cron]
    python -m tasks.altcoin_season [--cron]
"""
