"""Grid edit exceptions."""


class GridEditError(Exception):
    """Base class for errors raised by pyqt-gridedit."""


class FieldPathError(GridEditError, LookupError):
    """Raised when a qualified field path cannot be resolved against a scope."""


class TemplateNotFoundError(GridEditError, KeyError):
    """Raised when an editor template id is not present in the template cache."""


class UnknownEditorError(GridEditError, KeyError):
    """Raised when a template names an editor directive that was never registered."""
