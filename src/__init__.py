"""SiliconFlow Chat Proxy"""
