"""Field-name alias lists used to interpret free-form record fields.

Imported tables have no fixed schema, so names, emails, locations and
companies are located by trying a fixed list of common column spellings.
The defaults can be replaced by a YAML file (``FIELD_ALIASES_PATH``) whose
top-level keys match the ``FieldAliases`` attributes.
"""

from __future__ import annotations

from pathlib import Path

import structlog
import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger()

# Display-name / mention-matching priority order
NAME_ALIASES: tuple[str, ...] = (
    "FULL_NAME",
    "full_name",
    "Full Name",
    "Name",
    "name",
    "FIRST_NAME",
    "First Name",
    "first_name",
)

# Context allow-list entries (names include last-name columns, which never
# serve as a display name on their own)
CONTEXT_NAME_ALIASES: tuple[str, ...] = (
    "FULL_NAME",
    "full_name",
    "Full Name",
    "Name",
    "name",
    "FIRST_NAME",
    "First Name",
    "LAST_NAME",
    "Last Name",
)

EMAIL_ALIASES: tuple[str, ...] = ("EMAIL", "Email", "E-mail", "EMAIL1", "EMAIL2", "EMAIL3")

LOCATION_ALIASES: tuple[str, ...] = (
    "PERSON_CITY",
    "PERSON_STATE",
    "PERSON_COUNTRY",
    "City",
    "State",
    "Country",
)

COMPANY_ALIASES: tuple[str, ...] = ("COMPANY", "Company")

DEFAULT_DISPLAY_NAME = "Client"


class FieldAliases(BaseModel):
    """The alias lists, grouped so they can be swapped as one unit."""

    model_config = ConfigDict(frozen=True)

    names: tuple[str, ...] = NAME_ALIASES
    context_names: tuple[str, ...] = CONTEXT_NAME_ALIASES
    emails: tuple[str, ...] = EMAIL_ALIASES
    locations: tuple[str, ...] = LOCATION_ALIASES
    companies: tuple[str, ...] = COMPANY_ALIASES
    default_display_name: str = Field(default=DEFAULT_DISPLAY_NAME, min_length=1)

    @property
    def context_allow_list(self) -> tuple[str, ...]:
        """Every field name kept when a record is slimmed for the model."""
        ordered: list[str] = []
        for group in (self.context_names, self.emails, self.locations, self.companies):
            for name in group:
                if name not in ordered:
                    ordered.append(name)
        return tuple(ordered)


DEFAULT_ALIASES = FieldAliases()


def load_field_aliases(config_path: Path | None = None) -> FieldAliases:
    """Load alias lists from YAML, or return the built-in defaults.

    Keys missing from the file keep their default value.

    Args:
        config_path: Path to a YAML file.  ``None`` returns
            ``DEFAULT_ALIASES``.

    Returns:
        The resolved ``FieldAliases``.

    Raises:
        FileNotFoundError: If *config_path* is given but does not exist.
    """
    if config_path is None:
        return DEFAULT_ALIASES

    if not config_path.exists():
        raise FileNotFoundError(f"Field alias config not found: {config_path}")

    with config_path.open() as f:
        raw = yaml.safe_load(f) or {}

    aliases = FieldAliases.model_validate(raw.get("field_aliases", raw))
    logger.info("field_aliases_loaded", path=str(config_path))
    return aliases
