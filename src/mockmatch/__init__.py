"""mockmatch - declarative mock-response matching for HTTP test harnesses."""

from mockmatch.models import Rule
from mockmatch.store import RuleStore

__version__ = "0.1.0"

__all__ = ["Rule", "RuleStore", "__version__"]
