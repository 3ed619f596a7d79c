import ssl

import certifi
import httpx
from langchain_openai import ChatOpenAI

from chat_runner.settings import settings


def build_chat_llm(
    api_key: str | None = None,
    base_url: str | None = None,
    model_name: str | None = None,
) -> ChatOpenAI:
    ca_certs = certifi.where()
    ssl_context = ssl.create_default_context(cafile=ca_certs)

    return ChatOpenAI(
        model=model_name or settings.model_name,
        api_key=api_key or settings.openai_api_key,
        base_url=base_url or settings.openai_model_url,
        temperature=settings.llm_temperature,
        http_client=httpx.Client(verify=ssl_context),
        http_async_client=httpx.AsyncClient(verify=ssl_context),
    )
