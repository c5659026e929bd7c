"""Exceptions raised by the ASCII art pipeline."""


class PipelineError(Exception):
    """Base class for every error raised by the pipeline."""


class LoadError(PipelineError):
    """No image source was given, or the source could not be decoded."""


class ValidationError(PipelineError, ValueError):
    """A configuration value is out of its allowed range."""


class ConfigError(PipelineError, ValueError):
    """Unknown configuration key, enum value or mode/charset pairing."""


class StateError(PipelineError, RuntimeError):
    """An operation needs a loaded image and none is available."""
