"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from page_lens.config import load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.cache.ttl_seconds)
    180.0
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BuilderSettings(BaseModel):
    """
    Content tree builder settings.
    
    Attributes:
        max_depth: Hard recursion cap for the tree walk
        main_content_threshold: Content score a semantic/identifier candidate must exceed
        min_candidate_chars: Minimum text length for density-fallback candidates
        words_per_minute: Reading speed used for reading-time estimates
    """
    max_depth: int = Field(default=64, ge=1, le=512)
    main_content_threshold: float = Field(default=50.0, ge=0.0)
    min_candidate_chars: int = Field(default=100, ge=0)
    words_per_minute: int = Field(default=200, ge=1, le=2000)


class ExtractionSettings(BaseModel):
    """
    Default extraction request values.
    
    Attributes:
        max_chars: Output budget in characters
        min_importance: Importance threshold for included nodes
        priority_order: Node ordering strategy
        adaptive_chunking: Try a graceful cut of the node that overflows the budget
        section_budget: Budget used when rendering a single section
        summary_max_length: Default summary length
    """
    max_chars: int = Field(default=20000, ge=1)
    min_importance: float = Field(default=0.5, ge=0.0)
    priority_order: Literal["mixed", "importance", "dom-order"] = "mixed"
    adaptive_chunking: bool = True
    section_budget: int = Field(default=50000, ge=1)
    summary_max_length: int = Field(default=500, ge=1)


class CacheSettings(BaseModel):
    """
    Analysis cache settings.
    
    Attributes:
        enabled: Consult and fill the cache in the pipeline
        max_size: Maximum number of cached documents
        ttl_seconds: Default entry lifetime
        use_fingerprint: Suffix cache keys with a fingerprint of the page markup
    """
    enabled: bool = True
    max_size: int = Field(default=50, ge=1, le=10000)
    ttl_seconds: float = Field(default=180.0, gt=0)
    use_fingerprint: bool = False


class ProviderSettings(BaseModel):
    """
    Live page provider settings.
    
    Attributes:
        max_depth: Depth cap for the in-page serializer
        timeout_ms: Navigation / load-state timeout
        wait_for_load: Wait for network idle before capturing
        headless: Run the browser headless when the CLI renders a URL
    """
    max_depth: int = Field(default=64, ge=1, le=512)
    timeout_ms: int = Field(default=30000, ge=1000, le=300000)
    wait_for_load: bool = True
    headless: bool = True


class LoggingSettings(BaseModel):
    """
    Logging configuration.
    
    Attributes:
        level: Log level
        format: Log format string for file output
        file: Log file path (None for console only)
        json_format: Use JSON format for logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    file: Optional[str] = None
    json_format: bool = False


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.
    
    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with PAGE_LENS__)
    3. Config file (YAML)
    4. Default values
    
    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(cache=CacheSettings(ttl_seconds=60))  # Override
    """
    
    model_config = SettingsConfigDict(
        env_prefix="PAGE_LENS__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )
    
    builder: BuilderSettings = Field(default_factory=BuilderSettings)
    extraction: ExtractionSettings = Field(default_factory=ExtractionSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    provider: ProviderSettings = Field(default_factory=ProviderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    
    debug: bool = False
    
    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.
        
        Args:
            overrides: Dictionary of values to override
            
        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()
        
        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base
        
        merged = deep_merge(current, overrides)
        return Settings(**merged)
