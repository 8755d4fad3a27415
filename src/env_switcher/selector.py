"""Selection surface and gesture host.

:class:`EnvironmentSelector` is the model of the list a tester picks an
environment from. :class:`EnvSwitcher` wires a tap recognizer to it: once
the gesture completes, a selector is built and handed to the host's
``open_selector`` callback, which renders it however the host likes.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Union

from .credentials import CredentialForm
from .environment import EnvironmentConfig, environment_key
from .gesture import DEFAULT_REQUIRED_TAPS, DEFAULT_TAP_WINDOW_MS, Clock, TapFeedback, TapGestureRecognizer
from .logging import LogEvent, log_debug
from .registry import EnvironmentRegistry


@dataclass(frozen=True)
class SelectorOption:
    """One row of the selection list."""

    environment: EnvironmentConfig
    is_current: bool

    @property
    def requires_credentials(self) -> bool:
        return CredentialForm(self.environment).is_required


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of confirming a selection."""

    environment: EnvironmentConfig
    changed: bool
    credentials: Dict[str, str]


class EnvironmentSelector:
    """Lists the registered environments and applies the tester's choice."""

    def __init__(
        self,
        registry: EnvironmentRegistry,
        on_environment_changed: Optional[Callable[[EnvironmentConfig], None]] = None,
    ):
        self.registry = registry
        self.on_environment_changed = on_environment_changed

    def options(self) -> List[SelectorOption]:
        """Registered environments, in order, with the active one flagged."""
        current = self.registry.current_environment
        current_key = environment_key(current) if current is not None else None
        return [
            SelectorOption(environment=env, is_current=environment_key(env) == current_key)
            for env in self.registry.available_environments
        ]

    def credential_form(self, target: Union[EnvironmentConfig, str]) -> CredentialForm:
        name = target if isinstance(target, str) else environment_key(target)
        return CredentialForm(self.registry.get_environment(name))

    def confirm(
        self,
        target: Union[EnvironmentConfig, str],
        credentials: Optional[Mapping[str, str]] = None,
    ) -> SelectionResult:
        """Switch to ``target``.

        Confirming the environment that is already active does nothing.
        Otherwise credentials are validated first when the target requires
        them, and ``on_environment_changed`` runs after the switch.

        Raises:
            EnvironmentNotAvailableError: If ``target`` is not registered
            CredentialValidationError: If the credentials are rejected
        """
        name = target if isinstance(target, str) else environment_key(target)
        env = self.registry.get_environment(name)

        current = self.registry.current_environment
        if current is not None and environment_key(current) == name:
            log_debug(LogEvent.ENV_SWITCH, "Environment already selected", name=name)
            return SelectionResult(environment=env, changed=False, credentials={})

        form = CredentialForm(env)
        accepted: Dict[str, str] = {}
        if form.is_required:
            accepted = form.submit(credentials or {})

        self.registry.switch_environment(env)
        if self.on_environment_changed is not None:
            self.on_environment_changed(env)
        return SelectionResult(environment=env, changed=True, credentials=accepted)


class EnvSwitcher:
    """Hidden multi-tap entry point to the environment selector.

    The host forwards taps on some region of its UI to :meth:`tap`. After
    ``required_taps`` quick taps the selector opens.
    """

    def __init__(
        self,
        registry: EnvironmentRegistry,
        open_selector: Callable[[EnvironmentSelector], None],
        required_taps: int = DEFAULT_REQUIRED_TAPS,
        tap_window_ms: int = DEFAULT_TAP_WINDOW_MS,
        enabled: bool = True,
        on_tap: Optional[TapFeedback] = None,
        on_environment_changed: Optional[Callable[[EnvironmentConfig], None]] = None,
        clock: Optional[Clock] = None,
    ):
        self.registry = registry
        self.open_selector = open_selector
        self.on_environment_changed = on_environment_changed
        self.recognizer = TapGestureRecognizer(
            on_trigger=self.open,
            required_taps=required_taps,
            tap_window_ms=tap_window_ms,
            enabled=enabled,
            on_tap=on_tap,
            clock=clock,
        )

    @property
    def enabled(self) -> bool:
        return self.recognizer.enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self.recognizer.enabled = value

    def tap(self, timestamp_ms: Optional[float] = None) -> bool:
        """Forward a tap; returns True when it opened the selector."""
        return self.recognizer.tap(timestamp_ms)

    def open(self) -> EnvironmentSelector:
        """Open the selector directly, bypassing the gesture."""
        selector = EnvironmentSelector(self.registry, on_environment_changed=self.on_environment_changed)
        log_debug(LogEvent.GESTURE, "Opening environment selector")
        self.open_selector(selector)
        return selector
