# weather_glass/services/__init__.py
"""服务层模块"""

from .proxy_service import ProxyService
from .outcome import classify_response

__all__ = ["ProxyService", "classify_response"]
