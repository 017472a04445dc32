from __future__ import annotations

from typing import TYPE_CHECKING

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

from . import constants as cs
from . import exceptions as ex
from .resolution.visibility import AlwaysVisible, ModifierVisibilityChecker

if TYPE_CHECKING:
    from .types_defs import VisibilityCheckerProtocol

load_dotenv()


class AppConfig(BaseSettings):
    """
    (H) All settings are loaded from environment variables or a .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    LOG_LEVEL: str = cs.DEFAULT_LOG_LEVEL
    GRAPH_FILE: str = cs.DEFAULT_GRAPH_FILE
    TEST_VISIBILITY: bool = False
    VISIBILITY_MODE: str = cs.VisibilityMode.MODIFIERS

    def resolve_graph_file(self, graph_file: str | None) -> str:
        return graph_file or self.GRAPH_FILE

    def resolve_test_visibility(self, test_visibility: bool | None) -> bool:
        return self.TEST_VISIBILITY if test_visibility is None else test_visibility

    def visibility_checker(self) -> VisibilityCheckerProtocol:
        match self.VISIBILITY_MODE.lower():
            case cs.VisibilityMode.ALWAYS:
                return AlwaysVisible()
            case cs.VisibilityMode.MODIFIERS:
                return ModifierVisibilityChecker()
            case mode:
                raise ValueError(
                    ex.UNKNOWN_VISIBILITY_MODE.format(
                        mode=mode, available=", ".join(cs.VisibilityMode)
                    )
                )


settings = AppConfig()
