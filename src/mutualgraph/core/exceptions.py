"""
Exception hierarchy for mutualgraph.

Only parse-time failures halt a load. Everything downstream of a successful
parse degrades gracefully: dangling references are dropped and augmentation
failures leave a source untouched.
"""


class MutualGraphError(Exception):
    """Base class for all mutualgraph errors."""


class MalformedSourceError(MutualGraphError):
    """An export file is not valid JSON or its top level is not an object."""

    def __init__(self, filename: str, message: str):
        self.filename = filename
        self.message = message
        super().__init__(f"{filename}: {message}")


class AugmentationFailure(MutualGraphError):
    """Origin detection failed for one source. Never escapes the augmenter."""

    def __init__(self, filename: str, cause: Exception):
        self.filename = filename
        self.cause = cause
        super().__init__(f"Could not augment {filename}: {cause}")


class NodeNotFoundError(MutualGraphError):
    """A lookup referenced an identity that is not in the built graph."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id}")


class DanglingReferenceWarning(UserWarning):
    """A mutual entry points to an identity with no record in the merged graph."""

    def __init__(self, owner_id: str, missing_id: str):
        self.owner_id = owner_id
        self.missing_id = missing_id
        super().__init__(f"{owner_id} lists unknown mutual {missing_id}")
