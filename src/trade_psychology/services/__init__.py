from .analysis import AnalysisService
from .dashboard import DashboardService
from .trades import TradePage, TradeService
from .trading_plan import TradingPlanService

__all__ = [
    "AnalysisService",
    "DashboardService",
    "TradePage",
    "TradeService",
    "TradingPlanService",
]
