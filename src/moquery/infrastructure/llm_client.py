"""
LLM client for OpenAI-compatible chat endpoints using LangChain.

This module provides a synchronous LLM client built on LangChain's ChatOpenAI.
The default configuration talks to a local Ollama server through its
OpenAI-compatible API.
"""

from typing import List, Optional, Sequence
from langchain_openai import ChatOpenAI
from langchain_core.messages import HumanMessage, SystemMessage, BaseMessage
from pydantic import SecretStr

from ..config import LLMConfig
from ..domain.base_enums import MessageRole
from ..domain.errors import LLMError
from ..domain.prompt import PromptMessage
from ..utils.logging import get_module_logger
from ..utils.tracing import current_trace_id
from ..utils.token_utils import InputValidator


logger = get_module_logger()


def to_langchain_messages(messages: Sequence[PromptMessage]) -> List[BaseMessage]:
    """Convert role-tagged prompt messages to LangChain message objects."""
    converted: List[BaseMessage] = []
    for message in messages:
        if message.role == MessageRole.SYSTEM:
            converted.append(SystemMessage(content=message.content))
        else:
            converted.append(HumanMessage(content=message.content))
    return converted


class LLMClient:
    """
    LLM client using LangChain's ChatOpenAI.

    This is a thin infrastructure layer for LLM operations. Prompt
    construction and reply parsing live in SQLGenerationRepository.

    Features:
    - Any OpenAI-compatible endpoint (Ollama, vLLM, OpenAI, OpenRouter)
    - Configurable model, temperature and max_tokens
    - Structured logging with trace IDs
    - Input size validation before the request is sent
    - No internal retries by default; a failed request is terminal

    Usage:
        client = LLMClient(config)
        client.connect()

        reply = client.generate(
            [
                PromptMessage(role=MessageRole.SYSTEM, content="You are a SQL expert."),
                PromptMessage(role=MessageRole.HUMAN, content="How many orders?"),
            ],
            temperature=0.1,
        )

        client.close()
    """

    def __init__(self, config: LLMConfig):
        """
        Initialize LLM client with configuration.

        Args:
            config: LLM configuration
        """
        self.config = config
        self._llm: Optional[ChatOpenAI] = None
        self._is_connected = False

        logger.info(
            "LLMClient initialized",
            default_model=config.default_model,
            base_url=config.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens
        )

    def connect(self) -> None:
        """
        Initialize LangChain ChatOpenAI client.

        Note: This creates the client configuration but doesn't make any API calls.
        Validation happens on first actual use.

        Raises:
            LLMError: If initialization fails
        """
        if self._is_connected:
            logger.warning("LLM client already connected")
            return

        trace_id = current_trace_id()
        logger.info("Initializing LLM client", trace_id=trace_id)

        try:
            self._llm = ChatOpenAI(
                model=self.config.default_model,
                api_key=SecretStr(self.config.api_key),
                base_url=self.config.base_url,
                temperature=self.config.temperature,
                max_completion_tokens=self.config.max_tokens,
                timeout=self.config.timeout_seconds,
                max_retries=self.config.max_retries
            )

            self._is_connected = True
            logger.info("LLM client initialized successfully", trace_id=trace_id)

        except Exception as e:
            error_msg = f"Failed to initialize LLM client: {e}"
            logger.error(error_msg, error_type=type(e).__name__, trace_id=trace_id)
            raise LLMError(error_msg) from e

    def close(self) -> None:
        """Close LLM client and release resources."""
        trace_id = current_trace_id()
        logger.info("Closing LLM client", trace_id=trace_id)

        # LangChain ChatOpenAI doesn't need explicit cleanup
        self._is_connected = False
        self._llm = None

        logger.info("LLM client closed", trace_id=trace_id)

    def is_connected(self) -> bool:
        """Check if LLM client is connected."""
        return self._is_connected and self._llm is not None

    def generate(
        self,
        messages: Sequence[PromptMessage],
        temperature: Optional[float] = None,
    ) -> str:
        """
        Send one chat request and return the first completion's text.

        Args:
            messages: Ordered prompt messages, sent verbatim
            temperature: Optional temperature override (0.0-1.0)

        Returns:
            Text of the first completion choice

        Raises:
            LLMError: If the request fails, the input is too large or the
                model returns no completion choices
        """
        if not self.is_connected() or self._llm is None:
            raise LLMError("LLM client is not connected")

        try:
            InputValidator.validate_total_chars(
                [message.content for message in messages],
                max_chars=self.config.max_input_chars
            )
        except ValueError as e:
            raise LLMError(str(e)) from e

        trace_id = current_trace_id()
        effective_temperature = self.config.temperature if temperature is None else temperature

        logger.info(
            "Generating LLM response",
            model=self.config.default_model,
            message_count=len(messages),
            prompt_length=sum(len(message.content) for message in messages),
            temperature=effective_temperature,
            trace_id=trace_id
        )

        try:
            result = self._llm.generate(
                [to_langchain_messages(messages)],
                temperature=effective_temperature,
            )
        except Exception as e:
            error_msg = f"LLM generation failed: {e}"
            logger.error(error_msg, error_type=type(e).__name__, trace_id=trace_id)
            raise LLMError(error_msg) from e

        if not result.generations or not result.generations[0]:
            logger.error("LLM returned no completion", trace_id=trace_id)
            raise LLMError("no completion")

        content = result.generations[0][0].text

        logger.info(
            "LLM response generated successfully",
            response_length=len(content),
            trace_id=trace_id
        )

        return content
