"""Base class for all dataclasses in the `mracq` package."""

import dataclasses
from collections.abc import Callable, Iterator
from copy import copy as shallowcopy
from copy import deepcopy
from typing import ClassVar, cast

import torch
from typing_extensions import Any, Self, TypeVar, dataclass_transform


class InconsistentDeviceError(ValueError):
    """Raised if the tensors of an object are not all on the same device."""

    def __init__(self, *devices):
        """Initialize with the devices that differ."""
        super().__init__(f'Inconsistent devices found, found at least {", ".join(str(d) for d in devices)}')


T = TypeVar('T')


@dataclass_transform()
class Dataclass:
    """Dataclass base for the acquisition containers.

    Subclasses are turned into dataclasses. In addition, they get
    - `~Dataclass.apply` and `~Dataclass.apply_` to transform all fields,
    - `~Dataclass.clone` for a deep copy that shares no tensor storage,
    - `~Dataclass.to` to change device or precision of all tensors,
    - `~Dataclass.device`, the common device of all tensors.

    Tensors are found in fields, in nested `Dataclass` fields and inside list, tuple and dict fields,
    as trajectories and k-space data are stored per echo.
    Setting attributes that are not fields raises an `AttributeError` once the object is initialized.
    """

    __dataclass_fields__: ClassVar[dict[str, dataclasses.Field[Any]]]

    def __init_subclass__(cls, no_new_attributes: bool = True, **kwargs):
        """Turn the subclass into a dataclass."""
        dataclasses.dataclass(cls)
        super().__init_subclass__(**kwargs)
        subclass_post_init = vars(cls).get('__post_init__')

        if no_new_attributes:

            def guarded_setattr(self: object, name: str, value: Any) -> None:  # noqa: ANN401
                if not hasattr(self, name) and hasattr(self, '_Dataclass__initialized'):
                    raise AttributeError(f'Cannot set attribute {name} on {type(self).__name__}')
                object.__setattr__(self, name, value)

            cls.__setattr__ = guarded_setattr  # type: ignore[method-assign]

        if subclass_post_init and subclass_post_init is not Dataclass.__post_init__:
            # run the checks of the subclass first, the object counts as initialized afterwards
            def chained_post_init(self: Dataclass) -> None:
                subclass_post_init(self)
                Dataclass.__post_init__(self)

            cls.__post_init__ = chained_post_init  # type: ignore[method-assign]

    def __post_init__(self) -> None:
        """Mark the object as initialized. Subclasses add their checks here."""
        self.__initialized = True

    def _items(self) -> Iterator[tuple[str, Any]]:
        """Iterate over the names and values of the fields."""
        for field in dataclasses.fields(cast(Any, self)):
            yield field.name, getattr(self, field.name)

    def apply_(
        self: Self,
        function: Callable[[Any], Any] | None = None,
        *,
        memo: dict[int, Any] | None = None,
        recurse: bool = True,
    ) -> Self:
        """Replace every field by the result of a function, in-place.

        Parameters
        ----------
        function
            Called with the value of each field. `None` leaves the object unchanged.
        memo
            Results by `id` of the original values. A value shared by several fields is
            transformed once and stays shared.
        recurse
            If `True`, nested `Dataclass` fields are transformed field by field
            instead of being passed to `function`.
        """
        if function is None:
            return self
        if memo is None:
            memo = {}

        for name, data in self._items():
            if id(data) not in memo:
                if recurse and isinstance(data, Dataclass):
                    memo[id(data)] = data.apply_(function, memo=memo)
                else:
                    memo[id(data)] = function(data)
            object.__setattr__(self, name, memo[id(data)])
        return self

    def apply(
        self: Self,
        function: Callable[[Any], Any] | None = None,
        *,
        recurse: bool = True,
    ) -> Self:
        """Apply a function to all fields of a copy. See `apply_`."""
        return self.clone().apply_(function, recurse=recurse)

    def to(
        self,
        device: str | torch.device | int | None = None,
        dtype: torch.dtype | None = None,
        *,
        copy: bool = False,
    ) -> Self:
        """Move all tensors to a device and/or change their precision.

        Returns a new object. Real tensors are converted to the real and complex tensors to the
        complex counterpart of `dtype`, so `dtype=torch.float64` yields `float64` nodes and
        `complex128` k-space data. Integer and bool tensors, such as subsample indices, keep their dtype.

        Parameters
        ----------
        device
            The destination device. `None` keeps the device.
        dtype
            The destination precision. `None` keeps the dtype.
        copy
            If `True`, all tensors and other values are copied even if no conversion is needed.
        """
        memo: dict[int, Any] = {}

        def tensor_to(data: torch.Tensor) -> torch.Tensor:
            if dtype is None or not (data.is_floating_point() or data.is_complex()):
                return data.to(device=device, copy=copy)
            new_dtype = dtype.to_complex() if data.is_complex() else dtype.to_real()
            return data.to(device=device, dtype=new_dtype, copy=copy)

        def convert(data: T) -> T:
            converted: Any
            if id(data) in memo:
                return cast(T, memo[id(data)])
            if isinstance(data, torch.Tensor):
                converted = tensor_to(data)
            elif isinstance(data, Dataclass):
                converted = shallowcopy(data).apply_(convert, recurse=False)
            elif isinstance(data, list | tuple):
                converted = type(data)(convert(item) for item in data)
            elif isinstance(data, dict):
                converted = {key: convert(value) for key, value in data.items()}
            else:
                converted = deepcopy(data) if copy else data
            memo[id(data)] = converted
            return cast(T, converted)

        return convert(self)

    def clone(self: Self) -> Self:
        """Return a deep copy of the object."""
        return self.to(copy=True)

    @property
    def device(self) -> torch.device | None:
        """The device of the tensors.

        Tensor and `Dataclass` fields and the items of list and tuple fields are considered.
        `None` if the object holds no tensors.

        Raises
        ------
        `InconsistentDeviceError`
            If the tensors are on different devices.
        """
        device: torch.device | None = None
        for _, data in self._items():
            candidates = data if isinstance(data, list | tuple) else (data,)
            for candidate in candidates:
                current_device = getattr(candidate, 'device', None)
                if current_device is None:
                    continue
                if device is None:
                    device = current_device
                elif device != current_device:
                    raise InconsistentDeviceError(current_device, device)
        return device
