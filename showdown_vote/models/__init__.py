# Models Package
from .contest import Contest
from .showdown import Showdown
from .couple import Couple
from .dancer import Dancer
from .audience_user import AudienceUser
from .vote import Vote
from .app_state import AppState
from .raw_snapshot import RawSnapshot

__all__ = [
    "Contest",
    "Showdown",
    "Couple",
    "Dancer",
    "AudienceUser",
    "Vote",
    "AppState",
    "RawSnapshot"
]
