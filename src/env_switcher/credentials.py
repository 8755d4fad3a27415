"""Credential collection for environments that require it.

:class:`CredentialForm` is the model behind whatever surface asks the tester
for credentials: it supplies initial values, checks required fields and
validators, and masks password values for display. It never stores the
values it is given.
"""

from typing import Dict, Mapping, Optional, Tuple

from .environment import CredentialField, EnvironmentConfig
from .errors import CredentialValidationError
from .logging import LogEvent, log_debug

# Key used in an error mapping for the environment-level validator
ENVIRONMENT_ERROR_KEY = ""

MASK = "•" * 8


class CredentialForm:
    """Credential fields of one environment."""

    def __init__(self, environment: EnvironmentConfig):
        self.environment = environment

    @property
    def fields(self) -> Tuple[CredentialField, ...]:
        return self.environment.credential_fields

    @property
    def is_required(self) -> bool:
        """Whether credentials must pass before switching to the environment.

        An environment-level validator makes the check mandatory even when
        no fields are declared.
        """
        if not self.environment.requires_credentials:
            return False
        return bool(self.fields) or self.environment.credentials_validator is not None

    def initial_values(self) -> Dict[str, str]:
        """Values to pre-fill, taken from each field's default."""
        return {f.key: f.default_value for f in self.fields if f.default_value is not None}

    def _field_error(self, credential_field: CredentialField, value: Optional[str]) -> Optional[str]:
        if credential_field.is_required and not (value or "").strip():
            return f"{credential_field.label} is required"
        if credential_field.validator is not None:
            return credential_field.validator.validate(value)
        return None

    def validate(self, values: Mapping[str, str]) -> Dict[str, str]:
        """Check submitted values.

        Field checks run first; the environment-level validator only runs
        when every field passed, and its message is stored under
        ``ENVIRONMENT_ERROR_KEY``.

        Returns:
            Field key to error message; empty when the values are acceptable
        """
        errors: Dict[str, str] = {}
        for credential_field in self.fields:
            error = self._field_error(credential_field, values.get(credential_field.key))
            if error:
                errors[credential_field.key] = error

        validator = self.environment.credentials_validator
        if not errors and validator is not None:
            error = validator.validate(self.clean(values))
            if error:
                errors[ENVIRONMENT_ERROR_KEY] = error
        return errors

    def clean(self, values: Mapping[str, str]) -> Dict[str, str]:
        """Restrict ``values`` to the declared fields, filling in defaults."""
        cleaned = self.initial_values()
        for credential_field in self.fields:
            value = values.get(credential_field.key)
            if value is not None and value != "":
                cleaned[credential_field.key] = value
        return cleaned

    def submit(self, values: Mapping[str, str]) -> Dict[str, str]:
        """Validate and return the cleaned credentials.

        Raises:
            CredentialValidationError: If any check fails
        """
        merged = {**self.initial_values(), **{k: v for k, v in values.items() if v is not None}}
        errors = self.validate(merged)
        if errors:
            log_debug(
                LogEvent.CREDENTIALS,
                "Credentials rejected",
                environment=self.environment.name,
                fields=sorted(errors),
            )
            raise CredentialValidationError(
                f"Invalid credentials for {self.environment.display_name}",
                errors=errors,
                environment=self.environment.name,
            )
        return self.clean(merged)

    def display_values(self, values: Mapping[str, str]) -> Dict[str, str]:
        """Values safe to show on screen, with password fields masked."""
        shown: Dict[str, str] = {}
        for credential_field in self.fields:
            value = values.get(credential_field.key)
            if value is None:
                continue
            shown[credential_field.key] = MASK if credential_field.is_password and value else value
        return shown
