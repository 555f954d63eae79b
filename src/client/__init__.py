"""SiliconFlow Chat Proxy - Client"""

from src.client.cloud import CloudHandle, CloudInit, init_cloud
from src.client.silicium import SiliciumService, create_silicium_service

__all__ = ["CloudHandle", "CloudInit", "init_cloud", "SiliciumService", "create_silicium_service"]
