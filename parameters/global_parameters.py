# global_parameters.py

_SELECTION_MODES = ("vertex", "edge", "face")


def _check_value(key, value):
    """Normalise values of the known keys; unknown keys pass through."""
    if key == "default_material_index":
        index = int(value)
        if index < 0:
            raise ValueError(f"default_material_index must be >= 0, got {value!r}")
        return index
    if key == "selection_mode":
        mode = str(value).strip().lower()
        if mode not in _SELECTION_MODES:
            raise ValueError(
                f"selection_mode must be one of {_SELECTION_MODES}, got {value!r}"
            )
        return mode
    if key == "compact_output_json":
        return bool(value)
    return value


class GlobalParameters:
    """Document-wide settings read from ``global_parameters`` in mesh files.

    Keys use underscores instead of spaces. Unknown keys are stored as given
    so they survive a load/save round trip.
    """

    def __init__(self, initial_params=None):
        self._params = {
            # Material index given to polygon faces that do not name one.
            "default_material_index": 0,
            # Element type addressed by selection ids.
            "selection_mode": "vertex",
            "compact_output_json": False,
        }
        if initial_params:
            self.update(initial_params)

    def __getattr__(self, name):
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            return params[name]
        raise AttributeError(
            f"{type(self).__name__!s} object has no attribute {name!r}"
        )

    def __setattr__(self, name, value):
        if name == "_params":
            object.__setattr__(self, name, value)
            return
        params = self.__dict__.get("_params")
        if params is not None and name in params:
            params[name] = _check_value(name, value)
            return
        object.__setattr__(self, name, value)

    def get(self, key, default=None):
        return self._params.get(key, default)

    def set(self, key, value):
        """Set one parameter; raises ValueError for an invalid known value."""
        self._params[key] = _check_value(key, value)

    def update(self, params):
        for key, value in dict(params).items():
            self.set(key, value)

    def __contains__(self, key):
        return key in self._params

    def __repr__(self):
        return f"GlobalParameters({self._params})"

    def to_dict(self):
        """Plain copy of all parameters, for serialization."""
        return dict(self._params)
