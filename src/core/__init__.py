"""SiliconFlow Chat Proxy - Core"""
