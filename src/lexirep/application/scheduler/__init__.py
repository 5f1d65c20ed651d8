# Scheduler Package
from .load_balancer import LoadBalancer
from .sm2 import SM2Scheduler, format_interval

__all__ = ["LoadBalancer", "SM2Scheduler", "format_interval"]
