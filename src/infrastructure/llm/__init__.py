"""SiliconFlow Chat Proxy - LLM Infrastructure"""

from src.infrastructure.llm.siliconflow_client import SiliconFlowClient, ChatCompletionRequest

__all__ = ["SiliconFlowClient", "ChatCompletionRequest"]
