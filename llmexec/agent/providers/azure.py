"""
Azure OpenAI Provider for LLM Exec.

Implements connection to chat models deployed on Azure OpenAI.
"""

import os
from typing import Optional

from llmexec.agent.providers.openai import OpenAIProvider

DEFAULT_API_VERSION = "2024-06-01"


class AzureOpenAIProvider(OpenAIProvider):
    """
    Azure OpenAI provider.

    Requests are routed to a deployment rather than a model name; the
    deployment defaults to the model name when not given.

    Example:
        provider = AzureOpenAIProvider(
            model="gpt-4o",
            endpoint="https://my-instance.openai.azure.com",
            deployment="gpt-4o-prod",
        )
    """

    name = "azure"

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        deployment: Optional[str] = None,
        api_version: Optional[str] = None,
        **kwargs,
    ):
        """
        Initialize Azure OpenAI provider.

        Args:
            model: Underlying model name
            api_key: API key (defaults to AZURE_OPENAI_API_KEY env var)
            endpoint: Resource endpoint (defaults to AZURE_OPENAI_ENDPOINT, or
                is built from AZURE_OPENAI_API_INSTANCE_NAME)
            deployment: Deployment name (defaults to AZURE_OPENAI_API_DEPLOYMENT_NAME)
            api_version: API version (defaults to AZURE_OPENAI_API_VERSION)
            **kwargs: Additional arguments passed to base class
        """
        # Skip OpenAIProvider.__init__: the client and credentials differ
        super(OpenAIProvider, self).__init__(model, **kwargs)

        self.api_key = api_key or os.environ.get("AZURE_OPENAI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "Azure OpenAI API key required. Set AZURE_OPENAI_API_KEY environment "
                "variable or pass api_key parameter."
            )

        self.base_url = endpoint or os.environ.get("AZURE_OPENAI_ENDPOINT")
        if not self.base_url:
            instance = os.environ.get("AZURE_OPENAI_API_INSTANCE_NAME")
            if instance:
                self.base_url = f"https://{instance}.openai.azure.com"
        if not self.base_url:
            raise ValueError(
                "Azure OpenAI endpoint required. Set AZURE_OPENAI_ENDPOINT or "
                "AZURE_OPENAI_API_INSTANCE_NAME, or pass endpoint parameter."
            )

        self.deployment = (
            deployment
            or os.environ.get("AZURE_OPENAI_API_DEPLOYMENT_NAME")
            or model
        )
        self.api_version = (
            api_version
            or os.environ.get("AZURE_OPENAI_API_VERSION")
            or DEFAULT_API_VERSION
        )

        try:
            import openai
        except ImportError:
            raise ImportError(
                "openai package required. Install with: pip install openai"
            )

        self.client = openai.AsyncAzureOpenAI(
            api_key=self.api_key,
            azure_endpoint=self.base_url,
            azure_deployment=self.deployment,
            api_version=self.api_version,
            **self.client_options(),
        )
