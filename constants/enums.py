"""
Shared Enums

Application-wide enums used across tasks, the pipeline and the API.
"""
from enum import Enum


class TaskName(str, Enum):
    """Runnable task scripts."""
    FEAR_GREED = "fear_greed"
    ALTCOIN_SEASON_SCORE = "altcoin_season_score"
    ALTCOIN_SEASON = "altcoin_season"
    NEWS_MONITOR = "news_monitor"


class RunState(str, Enum):
    """States of one index scoring run."""
    CONFIGURING = "configuring"
    FETCHING_FACTORS = "fetching_factors"
    FETCHING_HEADLINES = "fetching_headlines"
    SCORING = "scoring"
    PERSISTING = "persisting"
    DONE = "done"
    ABORTED = "aborted"


class SessionType(str, Enum):
    """Remote browser session types offered by the browser service."""
    HOSTED = "hosted"
    CONSUMER_DISTRIBUTED = "consumer_distributed"


class NewsCategory(str, Enum):
    """Categories of monitored news sites."""
    INDONESIA = "indonesia"
    GLOBAL = "global"
    CRYPTO = "crypto"
    SPORTS = "sports"


class PerformanceDirection(str, Enum):
    """Direction of a coin against BTC on the altcoin season chart."""
    OUTPERFORM = "outperform"
    UNDERPERFORM = "underperform"
