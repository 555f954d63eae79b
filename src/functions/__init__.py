"""SiliconFlow Chat Proxy - Cloud Functions"""

from src.functions.call_silicium import FUNCTION_NAME, SiliciumProxy, get_silicium_proxy

__all__ = ["FUNCTION_NAME", "SiliciumProxy", "get_silicium_proxy"]
