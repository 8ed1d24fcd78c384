"""Gemini client using LangChain with tool calling support."""

import logging
from typing import Dict, List, Optional, Sequence

from langchain_core.messages import AIMessage, HumanMessage, SystemMessage, ToolMessage
from langchain_core.tools import BaseTool
from langchain_google_genai import ChatGoogleGenerativeAI

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
MAX_TOOL_ITERATIONS = 10


def _content_text(content) -> str:
    """Flatten message content that may arrive as a list of parts."""
    if isinstance(content, list):
        return "".join(
            part.get("text", "") if isinstance(part, dict) else str(part) for part in content
        )
    return content or ""


class GeminiLangChainClient:
    """Wrapper for Google Gemini API using LangChain, used by the workout flows and chat."""

    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_MODEL,
        system_instruction: Optional[str] = None,
        tools: Optional[Sequence[BaseTool]] = None,
        temperature: float = 0.7,
        max_output_tokens: int = 2048,
    ) -> None:
        """
        Initialize Gemini client with LangChain.

        Args:
            api_key: Google Gemini API key
            model_name: Model to use (default: gemini-2.0-flash)
            system_instruction: System instruction for chat messages
            tools: LangChain tools the chat model may call
            temperature: Sampling temperature for chat
            max_output_tokens: Maximum tokens in a chat response
        """
        self.api_key = api_key
        self.model_name = model_name
        self.system_instruction = system_instruction or ""
        self.chat_history: List = []
        self.tools = list(tools or [])

        self.llm = ChatGoogleGenerativeAI(
            model=model_name,
            google_api_key=api_key,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
        )
        self.llm_with_tools = self.llm.bind_tools(self.tools) if self.tools else self.llm

        logger.info(f"Initialized Gemini LangChain client ({model_name}) with {len(self.tools)} tools")

    def start_chat(self, history: Optional[List[Dict[str, str]]] = None) -> None:
        """
        Start a new chat session.

        Args:
            history: Optional chat history in format [{"role": "user/assistant", "content": "..."}]
        """
        self.chat_history = []

        if self.system_instruction:
            self.chat_history.append(SystemMessage(content=self.system_instruction))

        if history:
            for msg in history:
                if msg["role"] == "user":
                    self.chat_history.append(HumanMessage(content=msg["content"]))
                elif msg["role"] == "assistant":
                    self.chat_history.append(AIMessage(content=msg["content"]))

        logger.info(f"Started chat with {len(self.chat_history)} messages in history")

    def _run_tool(self, tool_call: Dict) -> ToolMessage:
        tool_name = tool_call.get("name", "unknown")
        try:
            logger.info(f"Executing tool: {tool_name}")
            logger.debug(f"Tool args: {tool_call.get('args')}")

            tool_result = None
            for tool in self.tools:
                if tool.name == tool_name:
                    tool_result = tool.invoke(tool_call["args"])
                    break

            if tool_result is None:
                tool_result = f"ERROR: Tool {tool_name} not found"
                logger.error(tool_result)

            return ToolMessage(content=str(tool_result), tool_call_id=tool_call["id"])

        except Exception as e:
            error_msg = f"ERROR executing tool {tool_name}: {str(e)}"
            logger.error(error_msg, exc_info=True)
            return ToolMessage(content=error_msg, tool_call_id=tool_call.get("id", "unknown"))

    def send_message(self, message: str) -> str:
        """
        Send a chat message and get the final response, resolving tool calls.

        Args:
            message: User message

        Returns:
            AI response text
        """
        if not self.chat_history and self.system_instruction:
            self.start_chat()

        self.chat_history.append(HumanMessage(content=message))
        logger.info(f"Sending message with {len(self.chat_history)} messages in context")

        response = self.llm_with_tools.invoke(self.chat_history)

        tool_call_count = 0
        while getattr(response, "tool_calls", None):
            tool_call_count += 1
            logger.info(f"Processing {len(response.tool_calls)} tool calls (iteration {tool_call_count})")

            self.chat_history.append(response)
            self.chat_history.extend(self._run_tool(call) for call in response.tool_calls)

            response = self.llm_with_tools.invoke(self.chat_history)

            if tool_call_count >= MAX_TOOL_ITERATIONS:
                logger.warning(f"Reached maximum tool call iterations ({MAX_TOOL_ITERATIONS})")
                break

        self.chat_history.append(response)
        return _content_text(response.content)

    def get_chat_history(self) -> List[Dict[str, str]]:
        """
        Get current chat history in simple format.

        Returns:
            List of messages in format [{"role": "user/assistant", "content": "..."}]
        """
        history = []
        for msg in self.chat_history:
            if isinstance(msg, HumanMessage):
                history.append({"role": "user", "content": msg.content})
            elif isinstance(msg, AIMessage) and not msg.tool_calls:
                history.append({"role": "assistant", "content": msg.content})

        return history

    def generate_structured_output(
        self,
        prompt: str,
        system_instruction: str,
        temperature: float = 0.3,
    ) -> str:
        """
        Generate structured output (JSON) with lower temperature.

        Args:
            prompt: Filled prompt template
            system_instruction: System instruction explaining the role and format
            temperature: Lower temperature for more deterministic output

        Returns:
            Raw model text, expected to be a JSON document
        """
        llm = ChatGoogleGenerativeAI(
            model=self.model_name,
            google_api_key=self.api_key,
            temperature=temperature,
            max_output_tokens=4096,
        )

        messages = [
            SystemMessage(content=system_instruction),
            HumanMessage(content=prompt),
        ]

        response = llm.invoke(messages)
        return _content_text(response.content)
