"""Pydantic schemas for persisted collections and request/response validation."""

from .auth import *  # noqa: F403
from .booking import *  # noqa: F403
from .common import *  # noqa: F403
from .date_override import *  # noqa: F403
from .faq import *  # noqa: F403
from .health import *  # noqa: F403
from .payment import *  # noqa: F403
from .pricing import *  # noqa: F403
from .registry import *  # noqa: F403
from .starting_price import *  # noqa: F403
