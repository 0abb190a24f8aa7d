"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.

Provider credentials are optional: a provider whose credentials are missing is
skipped when the capability registry is built, it never prevents startup.
"""

from typing import Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Capability Provider Configuration Models
# =====================================================================


class DataForSEOConfig(BaseModel):
    """DataForSEO MCP server configuration."""

    login: Optional[str] = Field(default=None, alias="DATAFORSEO_LOGIN", description="DataForSEO account login")
    password: Optional[str] = Field(
        default=None, alias="DATAFORSEO_PASSWORD", description="DataForSEO account password"
    )
    mcp_url: str = Field(
        default="https://mcp.dataforseo.com/http",
        alias="DATAFORSEO_MCP_URL",
        description="DataForSEO MCP endpoint (streamable HTTP)",
    )

    model_config = {"populate_by_name": True}

    @property
    def configured(self) -> bool:
        return bool(self.login and self.password)


class FirecrawlConfig(BaseModel):
    """Firecrawl MCP server configuration."""

    api_key: Optional[str] = Field(default=None, alias="FIRECRAWL_API_KEY", description="Firecrawl API key")
    mcp_url: Optional[str] = Field(
        default=None,
        alias="FIRECRAWL_MCP_URL",
        description="Firecrawl MCP endpoint; derived from the API key when unset",
    )

    model_config = {"populate_by_name": True}

    @property
    def endpoint_url(self) -> Optional[str]:
        if self.mcp_url:
            return self.mcp_url
        if self.api_key:
            return f"https://mcp.firecrawl.dev/{self.api_key}/v2/mcp"
        return None


class WinstonConfig(BaseModel):
    """Winston AI (originality detection) MCP server configuration."""

    api_key: Optional[str] = Field(default=None, alias="WINSTON_AI_API_KEY", description="Winston AI API key")
    mcp_url: str = Field(
        default="https://api.gowinston.ai/mcp/v1",
        alias="WINSTON_MCP_URL",
        description="Winston AI MCP endpoint (streamable HTTP)",
    )
    list_timeout_seconds: float = Field(
        default=10.0,
        alias="WINSTON_LIST_TIMEOUT_SECONDS",
        description="Maximum time to wait for the Winston tool listing",
    )

    model_config = {"populate_by_name": True}


class JinaConfig(BaseModel):
    """Jina AI configuration (MCP server and Reader REST API)."""

    api_key: Optional[str] = Field(default=None, alias="JINA_API_KEY", description="Jina AI API key")
    mcp_url: str = Field(
        default="https://mcp.jina.ai/sse", alias="JINA_MCP_URL", description="Jina AI MCP endpoint (SSE)"
    )
    reader_url: str = Field(
        default="https://r.jina.ai", alias="JINA_READER_URL", description="Jina Reader API base URL"
    )

    model_config = {"populate_by_name": True}


class PerplexityConfig(BaseModel):
    """Perplexity research API configuration."""

    api_key: Optional[str] = Field(default=None, alias="PERPLEXITY_API_KEY", description="Perplexity API key")
    api_url: str = Field(
        default="https://api.perplexity.ai/chat/completions",
        alias="PERPLEXITY_API_URL",
        description="Perplexity chat completions endpoint",
    )

    model_config = {"populate_by_name": True}


class RytrConfig(BaseModel):
    """Rytr text generation API configuration."""

    api_key: Optional[str] = Field(default=None, alias="RYTR_API_KEY", description="Rytr API key")
    api_base: str = Field(default="https://api.rytr.me/v1", alias="RYTR_API_BASE", description="Rytr API base URL")

    model_config = {"populate_by_name": True}


class OpenAIConfig(BaseModel):
    """OpenAI API configuration."""

    api_key: Optional[str] = Field(
        default=None, alias="OPENAI_API_KEY", description="OpenAI API key for authentication"
    )
    model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL", description="Default OpenAI chat model")
    base_url: str = Field(
        default="https://api.openai.com/v1", alias="OPENAI_BASE_URL", description="OpenAI API base URL"
    )

    model_config = {"populate_by_name": True}


class CodemodeConfig(BaseModel):
    """Script execution configuration."""

    timeout_ms: int = Field(
        default=30000, alias="CODEMODE_TIMEOUT_MS", description="Hard deadline for one script execution"
    )
    cancel_on_timeout: bool = Field(
        default=True,
        alias="CODEMODE_CANCEL_ON_TIMEOUT",
        description="Abort the script and cancel its in-flight capability call once the deadline passes",
    )

    model_config = {"populate_by_name": True}


class CacheConfig(BaseModel):
    """Read-through cache configuration."""

    redis_url: Optional[str] = Field(
        default=None,
        alias="REDIS_URL",
        description="Redis connection URL; an in-process store is used when unset",
    )
    key_prefix: str = Field(default="codemode:", alias="CACHE_KEY_PREFIX", description="Prefix for every cache key")
    tools_ttl_seconds: int = Field(
        default=60 * 60, alias="TOOL_CACHE_TTL_SECONDS", description="TTL for cached provider tool listings"
    )
    dataforseo_ttl_seconds: int = Field(
        default=60 * 60 * 24 * 7,
        alias="DATAFORSEO_CACHE_TTL_SECONDS",
        description="TTL for cached DataForSEO call results",
    )
    memory_ttl_seconds: int = Field(
        default=60 * 60,
        alias="MEMORY_CACHE_TTL_SECONDS",
        description="TTL for in-process copies of values read back from Redis",
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="CODEMODE_AI_LOG_LEVEL",
    )

    # =====================================================================
    # Script Execution
    # =====================================================================
    codemode_timeout_ms: int = Field(default=30000, alias="CODEMODE_TIMEOUT_MS")
    codemode_cancel_on_timeout: bool = Field(default=True, alias="CODEMODE_CANCEL_ON_TIMEOUT")

    # =====================================================================
    # Cache
    # =====================================================================
    redis_url: Optional[str] = Field(default=None, alias="REDIS_URL")
    cache_key_prefix: str = Field(default="codemode:", alias="CACHE_KEY_PREFIX")
    tool_cache_ttl_seconds: int = Field(default=60 * 60, alias="TOOL_CACHE_TTL_SECONDS")
    dataforseo_cache_ttl_seconds: int = Field(default=60 * 60 * 24 * 7, alias="DATAFORSEO_CACHE_TTL_SECONDS")
    memory_cache_ttl_seconds: int = Field(default=60 * 60, alias="MEMORY_CACHE_TTL_SECONDS")

    # =====================================================================
    # Capability Providers
    # =====================================================================
    dataforseo_login: Optional[str] = Field(default=None, alias="DATAFORSEO_LOGIN")
    dataforseo_password: Optional[str] = Field(default=None, alias="DATAFORSEO_PASSWORD")
    dataforseo_mcp_url: str = Field(default="https://mcp.dataforseo.com/http", alias="DATAFORSEO_MCP_URL")

    firecrawl_api_key: Optional[str] = Field(default=None, alias="FIRECRAWL_API_KEY")
    firecrawl_mcp_url: Optional[str] = Field(default=None, alias="FIRECRAWL_MCP_URL")

    winston_ai_api_key: Optional[str] = Field(default=None, alias="WINSTON_AI_API_KEY")
    winston_mcp_url: str = Field(default="https://api.gowinston.ai/mcp/v1", alias="WINSTON_MCP_URL")
    winston_list_timeout_seconds: float = Field(default=10.0, alias="WINSTON_LIST_TIMEOUT_SECONDS")

    jina_api_key: Optional[str] = Field(default=None, alias="JINA_API_KEY")
    jina_mcp_url: str = Field(default="https://mcp.jina.ai/sse", alias="JINA_MCP_URL")
    jina_reader_url: str = Field(default="https://r.jina.ai", alias="JINA_READER_URL")

    perplexity_api_key: Optional[str] = Field(default=None, alias="PERPLEXITY_API_KEY")
    perplexity_api_url: str = Field(
        default="https://api.perplexity.ai/chat/completions", alias="PERPLEXITY_API_URL"
    )

    rytr_api_key: Optional[str] = Field(default=None, alias="RYTR_API_KEY")
    rytr_api_base: str = Field(default="https://api.rytr.me/v1", alias="RYTR_API_BASE")

    openai_api_key: Optional[str] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    openai_base_url: str = Field(default="https://api.openai.com/v1", alias="OPENAI_BASE_URL")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def codemode(self) -> CodemodeConfig:
        """Get script execution configuration."""
        return CodemodeConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cache(self) -> CacheConfig:
        """Get cache configuration."""
        return CacheConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def dataforseo(self) -> DataForSEOConfig:
        """Get DataForSEO configuration from environment variables."""
        return DataForSEOConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def firecrawl(self) -> FirecrawlConfig:
        """Get Firecrawl configuration from environment variables."""
        return FirecrawlConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def winston(self) -> WinstonConfig:
        """Get Winston AI configuration from environment variables."""
        return WinstonConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def jina(self) -> JinaConfig:
        """Get Jina AI configuration from environment variables."""
        return JinaConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def perplexity(self) -> PerplexityConfig:
        """Get Perplexity configuration from environment variables."""
        return PerplexityConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def rytr(self) -> RytrConfig:
        """Get Rytr configuration from environment variables."""
        return RytrConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def openai(self) -> OpenAIConfig:
        """Get OpenAI configuration from environment variables."""
        return OpenAIConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
