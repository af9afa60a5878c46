class HashError(Exception):
    """Base class for hashing errors."""


class UnsupportedKindError(HashError):
    def __init__(self, kind, detail=None):
        msg = f"unknown kind to hash: {kind}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)
        self.kind = kind
        self.detail = detail


class HookError(HashError):
    def __init__(self, hook, field, key=None):
        msg = f"{hook} failed for field '{field}'"
        if key is not None:
            msg += f", key {key!r}"
        super().__init__(msg)
        self.hook = hook
        self.field = field
        self.key = key


class SinkWriteError(HashError):
    pass
