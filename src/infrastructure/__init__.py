"""SiliconFlow Chat Proxy - Infrastructure"""
