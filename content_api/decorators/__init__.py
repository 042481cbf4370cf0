from content_api.decorators.metrics import timed
from content_api.decorators.with_retry import with_retry

__all__ = ["timed", "with_retry"]
