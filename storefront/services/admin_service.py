"""
Admin Service - server configuration and themes
"""
import math
from typing import Dict, Union

from sqlalchemy.orm import Session

from storefront.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.logger import get_logger
from storefront.models.settings import Theme
from storefront.repositories.settings_repository import ThemeRepository, ServerConfigRepository
from storefront.schemas.admin import (
    ConfigEntry,
    ConfigResponse,
    ThemeCreate,
    ThemeUpdate,
    ThemeResponse,
    ThemeListResponse
)

logger = get_logger(__name__)

ConfigValue = Union[str, int, float, bool]


def _as_text(value: ConfigValue) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_number(text: str) -> bool:
    try:
        return math.isfinite(float(text))
    except ValueError:
        return False


class AdminService:
    """Service layer for admin-managed settings"""

    def __init__(self, db: Session):
        self.config_repository = ServerConfigRepository(db)
        self.theme_repository = ThemeRepository(db)

    def get_config(self) -> ConfigResponse:
        """All server settings as {key: {value, description, type}}"""
        return ConfigResponse(config={
            row.key: ConfigEntry(value=row.value, description=row.description, type=row.config_type)
            for row in self.config_repository.get_all()
        })

    def update_config(self, configs: Dict[str, ConfigValue]) -> ConfigResponse:
        """
        Update several settings at once

        Every key and value is checked before anything is written.

        Raises:
            ValidationError: Empty update, unknown key, or non-numeric value for a number setting
        """
        if not configs:
            raise ValidationError("Configuration data is required")

        rows = self.config_repository.get_by_keys(list(configs))
        unknown = sorted(set(configs) - set(rows))
        if unknown:
            raise ValidationError(f"Unknown configuration keys: {', '.join(unknown)}")

        values = {}
        for key, value in configs.items():
            text = _as_text(value)
            if rows[key].config_type == "number" and (isinstance(value, bool) or not _is_number(text)):
                raise ValidationError(f"Configuration '{key}' must be a number")
            values[key] = text

        self.config_repository.update_values(rows, values)
        # Values are never logged: some settings are passwords
        logger.info(f"Server configuration updated: {', '.join(sorted(values))}")
        return self.get_config()

    def list_themes(self) -> ThemeListResponse:
        return ThemeListResponse(themes=[
            ThemeResponse.model_validate(t) for t in self.theme_repository.get_all()
        ])

    def list_active_themes(self) -> ThemeListResponse:
        return ThemeListResponse(themes=[
            ThemeResponse.model_validate(t) for t in self.theme_repository.get_all(active_only=True)
        ])

    def create_theme(self, theme_data: ThemeCreate) -> ThemeResponse:
        """
        Create new theme

        Raises:
            ConflictError: Slug already used
        """
        if self.theme_repository.slug_exists(theme_data.slug):
            raise ConflictError(f"Theme with slug '{theme_data.slug}' already exists")

        theme = self.theme_repository.create(theme_data.model_dump())
        logger.info(f"Theme created: {theme.slug} (id={theme.id})")
        return ThemeResponse.model_validate(theme)

    def update_theme(self, theme_id: int, theme_data: ThemeUpdate) -> ThemeResponse:
        """Update only the provided fields of a theme"""
        theme = self._get_theme(theme_id)
        fields = {
            key: value for key, value in theme_data.model_dump(exclude_unset=True).items()
            if value is not None or key == "description"
        }
        if fields.get("slug") and self.theme_repository.slug_exists(fields["slug"], exclude_id=theme_id):
            raise ConflictError(f"Theme with slug '{fields['slug']}' already exists")
        if "css_variables" in fields and not fields["css_variables"]:
            raise ValidationError("CSS variables are required")

        theme = self.theme_repository.update(theme, fields)
        logger.info(f"Theme updated: {theme.slug} (id={theme.id})")
        return ThemeResponse.model_validate(theme)

    def delete_theme(self, theme_id: int) -> None:
        theme = self._get_theme(theme_id)
        self.theme_repository.delete(theme)
        logger.info(f"Theme deleted: {theme_id}")

    def _get_theme(self, theme_id: int) -> Theme:
        theme = self.theme_repository.get_by_id(theme_id)
        if not theme:
            raise NotFoundError(f"Theme with id={theme_id} not found")
        return theme
