"""
Base classes for credential management.

Contains the core infrastructure: CredentialField, CredentialType,
CredentialManager, and CredentialError.
Credential types are declared in separate provider files (oauth2.py, stripe.py).
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from dotenv import dotenv_values

REDACTED = "***"


class FieldType(str, Enum):
    """Input types a credential form can render."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class CredentialField:
    """A single named field of a credential type."""

    display_name: str
    """Label shown by the credential form (e.g., 'Client Secret')"""

    name: str
    """Key under which the value is stored (e.g., 'clientSecret')"""

    type: FieldType = FieldType.STRING

    default: Any = ""

    required: bool = False

    password: bool = False
    """Whether the value is secret and must be masked in forms and logs"""

    env_var: str = ""
    """Environment variable the CredentialManager reads this field from"""


@dataclass(frozen=True)
class CredentialType:
    """Declarative schema of a credential, consumed by credential UIs and storage."""

    name: str
    display_name: str
    properties: Tuple[CredentialField, ...]
    documentation_url: str = ""

    tools: Tuple[str, ...] = field(default_factory=tuple)
    """Tool names that require this credential (e.g., ['stripe_get_charge'])"""

    def field_names(self) -> List[str]:
        return [prop.name for prop in self.properties]

    def get_field(self, name: str) -> CredentialField:
        for prop in self.properties:
            if prop.name == name:
                return prop
        raise KeyError(f"Credential type '{self.name}' has no field '{name}'")

    def missing_fields(self, values: Mapping[str, Any]) -> List[str]:
        """Return required fields that are absent or empty in ``values``."""
        return [
            prop.name
            for prop in self.properties
            if prop.required and values.get(prop.name) in (None, "")
        ]

    def redact(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Copy ``values`` with every password field masked."""
        secret = {prop.name for prop in self.properties if prop.password}
        return {
            key: (REDACTED if key in secret and value not in (None, "") else value)
            for key, value in values.items()
        }

    def to_schema(self) -> Dict[str, Any]:
        """Describe the fields as a JSON-schema-like dict for form renderers."""
        properties: Dict[str, Any] = {}
        for prop in self.properties:
            entry: Dict[str, Any] = {
                "type": prop.type.value,
                "title": prop.display_name,
                "default": prop.default,
            }
            if prop.password:
                entry["sensitive"] = True
            properties[prop.name] = entry

        return {
            "title": self.display_name,
            "type": "object",
            "required": [prop.name for prop in self.properties if prop.required],
            "properties": properties,
        }


class CredentialError(Exception):
    """Raised when required credentials are missing."""
    pass


class CredentialManager:
    """
    Centralized credential resolution for declared credential types.

    Key features:
    - get(): Resolves all fields of a credential type into a dict
    - validate_for_tools(): Validates only credentials needed by specific tools
    - for_testing(): Factory for creating test instances with mock values
    """

    _types: Dict[str, CredentialType]
    _overrides: Dict[str, Dict[str, Any]]
    _tool_to_cred: Dict[str, str]
    _dotenv_path: Optional[Path]

    def __init__(
        self,
        types: Optional[Dict[str, CredentialType]] = None,
        _overrides: Optional[Dict[str, Dict[str, Any]]] = None,
        dotenv_path: Optional[Path] = None,
    ):
        """
        Initialize the credential manager.

        Args:
            types: Credential types by name (defaults to CREDENTIAL_TYPES)
            _overrides: Internal - used by for_testing() to inject test values
            dotenv_path: Optional path to .env file (defaults to cwd/.env)
        """
        if types is None:
            from . import CREDENTIAL_TYPES

            types = CREDENTIAL_TYPES

        self._types = types
        self._overrides = _overrides or {}
        self._dotenv_path = dotenv_path

        # Build reverse mapping: tool_name -> credential type name
        self._tool_to_cred = {}
        for cred_name, cred_type in self._types.items():
            for tool_name in cred_type.tools:
                self._tool_to_cred[tool_name] = cred_name

    @classmethod
    def for_testing(
        cls,
        overrides: Dict[str, Dict[str, Any]],
        types: Optional[Dict[str, CredentialType]] = None,
        dotenv_path: Optional[Path] = None,
    ) -> "CredentialManager":
        """Create a CredentialManager with test values."""
        return cls(types=types, _overrides=overrides, dotenv_path=dotenv_path)

    def _get_field(self, cred_name: str, prop: CredentialField) -> Any:
        """
        Get one field from overrides, os.environ, or .env file.

        Priority order:
        1. Test overrides
        2. os.environ
        3. .env file (hot-reload)
        """
        overrides = self._overrides.get(cred_name)
        if overrides is not None:
            return overrides.get(prop.name)

        if not prop.env_var:
            return None

        env_value = os.environ.get(prop.env_var)
        if env_value:
            return env_value

        return self._read_from_dotenv(prop.env_var)

    def _read_from_dotenv(self, env_var: str) -> Optional[str]:
        """Read a single env var from .env file without mutating os.environ."""
        dotenv_path = self._dotenv_path or Path.cwd() / ".env"
        if not dotenv_path.exists():
            return None

        values = dotenv_values(dotenv_path)
        return values.get(env_var)

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        """
        Resolve a credential by type name.

        Returns None when none of the type's required fields resolve, so
        callers can tell "not configured" apart from "partially configured".
        """
        cred_type = self.get_type(name)

        values: Dict[str, Any] = {}
        for prop in cred_type.properties:
            value = self._get_field(name, prop)
            values[prop.name] = prop.default if value in (None, "") else value

        required = [prop.name for prop in cred_type.properties if prop.required]
        if required and all(values[key] in (None, "") for key in required):
            return None
        return values

    def get_type(self, name: str) -> CredentialType:
        """Get the declared type for a credential."""
        if name not in self._types:
            raise KeyError(
                f"Unknown credential '{name}'. Available: {list(self._types.keys())}"
            )
        return self._types[name]

    def is_available(self, name: str) -> bool:
        """Check if every required field of a credential is set and non-empty."""
        values = self.get(name)
        return values is not None and not self.get_type(name).missing_fields(values)

    def get_credential_for_tool(self, tool_name: str) -> Optional[str]:
        """Get the credential type name required by a tool."""
        return self._tool_to_cred.get(tool_name)

    def get_missing_for_tools(
        self, tool_names: List[str]
    ) -> List[Tuple[str, CredentialType]]:
        """Get list of missing credentials for the given tools."""
        missing: List[Tuple[str, CredentialType]] = []
        checked: Set[str] = set()

        for tool_name in tool_names:
            cred_name = self._tool_to_cred.get(tool_name)
            if cred_name is None or cred_name in checked:
                continue

            checked.add(cred_name)
            if not self.is_available(cred_name):
                missing.append((cred_name, self._types[cred_name]))

        return missing

    def validate_for_tools(self, tool_names: List[str]) -> None:
        """Validate that all credentials required by the given tools are available."""
        missing = self.get_missing_for_tools(tool_names)

        if missing:
            raise CredentialError(self._format_missing_error(missing, tool_names))

    def _format_missing_error(
        self,
        missing: List[Tuple[str, CredentialType]],
        tool_names: List[str],
    ) -> str:
        """Format a clear, actionable error message for missing credentials."""
        lines = ["Cannot run tools: Missing credentials"]
        lines.append("The following tools require credentials that are not set:\n")

        for _, cred_type in missing:
            affected_tools = [t for t in tool_names if t in cred_type.tools]
            tools_str = ", ".join(affected_tools)

            lines.append(f"  {tools_str} requires {cred_type.display_name}")
            for prop in cred_type.properties:
                if prop.required and prop.env_var:
                    lines.append(f"    Set via: export {prop.env_var}=...")
            if cred_type.documentation_url:
                lines.append(f"    Docs: {cred_type.documentation_url}")
            lines.append("")

        lines.append("Set these environment variables and re-run.")
        return "\n".join(lines)
