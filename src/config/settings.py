"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use BANGTAGS_ prefix (e.g., BANGTAGS_VERBOSITY=3).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use BANGTAGS_ prefix.

    Examples:
        BANGTAGS_VERBOSITY=2
        BANGTAGS_DRAFT_TAG=self.draft
        BANGTAGS_KEYSMASH_MAX_LENGTH=20
    """

    model_config = SettingsConfigDict(
        env_prefix="BANGTAGS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging configuration
    verbosity: int = Field(
        default=1,
        description="Logging verbosity for processing passes (1=normal, 2=verbose, 3=trace)",
    )

    debug_mode: bool = Field(
        default=False,
        description="Log every span and dispatched command during a pass",
    )

    # Draft mode
    draft_banner: str = Field(
        default="[center]`#\u200c!draft!#`[/center]\n",
        description="Marker block prepended to a message that enters draft mode (must not contain a bare #!)",
    )

    draft_tag: str = Field(
        default="self.draft",
        description="Tag attached to a message that enters draft mode",
    )

    # Media description capture variables
    media_var_prefix: str = Field(
        default="media_",
        description="Prefix of the synthetic variable bound to a media attachment description",
    )

    media_var_suffix: str = Field(
        default="_desc",
        description="Suffix of the synthetic variable bound to a media attachment description",
    )

    # Keysmash generator
    keysmash_min_length: int = Field(
        default=6,
        description="Shortest keysmash the generator produces",
    )

    keysmash_max_length: int = Field(
        default=33,
        description="Longest keysmash the generator produces",
    )

    def mediaVar_make(self, index: int) -> str:
        """
        Generate the variable name bound to a media attachment description.

        Args:
            index: One-based attachment index

        Returns:
            Variable name (e.g., "media_1_desc")

        Example:
            >>> settings = AppSettings()
            >>> settings.mediaVar_make(2)
            'media_2_desc'
        """
        return f"{self.media_var_prefix}{index}{self.media_var_suffix}"


# Singleton instance - import this in your code
appsettings = AppSettings()
