"""Service modules"""
from .state import SessionState
from .synchronizer import PositionSynchronizer
from .mutations import MutationController
from .dashboard import LenderDashboard

__all__ = ["SessionState", "PositionSynchronizer", "MutationController", "LenderDashboard"]
