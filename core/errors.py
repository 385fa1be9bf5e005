"""Exceptions raised by the testcrate core."""


class CrateError(Exception):
    """Base class for errors the user can act on."""


class FrameworkNotDetectedError(CrateError):
    """No framework signal was found and none was chosen explicitly."""

    def __init__(self, root: str):
        super().__init__(
            f"Could not detect a test framework in {root}. "
            "Choose one explicitly (playwright or pytest)."
        )
        self.root = root


class InvalidOverrideError(CrateError):
    """An explicit override value is not usable."""


class RenderError(CrateError):
    """A file the renderer was expected to produce is missing."""
