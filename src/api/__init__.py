"""SiliconFlow Chat Proxy - API"""
