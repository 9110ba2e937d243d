# SPDX-License-Identifier: MIT
"""Exceptions raised by the conversion engine."""

from __future__ import annotations


class MavenizorError(Exception):
    """Base exception for conversion errors."""

    pass


class ValidationError(MavenizorError):
    """Raised when an input violates a precondition of the engine.

    Examples are a bundle without a symbolic name, or a version range with
    neither bound. Validation errors abort the whole conversion.
    """

    pass


class PatternSyntaxError(ValidationError):
    """Raised when a bundle or requirement pattern is malformed.

    Attributes:
        pattern: The offending pattern text
        reason: What is wrong with it
    """

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern '{pattern}': {reason}")


class DirectiveError(MavenizorError):
    """Raised when an option value is not a known conversion directive.

    Attributes:
        key: The option key whose value failed to parse
        value: The unparseable value
    """

    def __init__(self, key: str, value: str):
        self.key = key
        self.value = value
        super().__init__(
            f"Invalid conversion directive for '{key}': '{value}' "
            "(expected auto_detect, mavenize, omit, ignore or "
            "<groupId>:<artifactId>:<type>[:<classifier>]:<version>)"
        )


class StateError(MavenizorError):
    """Raised when a resolved bundle state cannot be loaded."""

    pass


class ConfigError(MavenizorError):
    """Raised when the [tool.mavenizor] configuration is invalid."""

    pass
