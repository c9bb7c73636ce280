"""Error taxonomy shared by the extractor, store, blender and synthesizer."""


class PersonaQuillError(Exception):
    """Base class for recoverable persona-quill errors."""


class InvalidWeight(PersonaQuillError):
    """A blend weight was zero, negative or not a number."""


class UnknownPlatform(PersonaQuillError):
    """The synthesizer was given a platform id it does not know."""


class MissingContent(PersonaQuillError):
    """A required text field (article body, training text, persona list) was empty."""


class NameReserved(PersonaQuillError):
    """A non-built-in persona was saved under a protected built-in name."""


class PersonaNotFound(PersonaQuillError):
    """No persona is stored under the requested name."""


class InvalidBackup(PersonaQuillError):
    """A persona backup record could not be parsed."""


class ProviderNotConfigured(PersonaQuillError):
    """The generation provider is unknown or has no API key."""
