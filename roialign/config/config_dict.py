"""Config dict module."""

from __future__ import annotations

import importlib
from collections.abc import Callable
from typing import Any

from ml_collections import ConfigDict, FieldReference

from roialign.common.typing import ArgsType


def resolve_class_name(clazz: type | Callable[..., Any] | str) -> str:  # type: ignore # pylint: disable=line-too-long
    """Resolves the full class name of the given class object, callable or str.

    Args:
        clazz (type | Callable[..., Any] | str): The object to resolve the
            full path of.

    Returns:
        str: The full path of the given object.

    Raises:
        ValueError: If the given object is a lambda function.

    Examples:
        >>> from roialign.op.roi_align import RoIAlign
        >>> resolve_class_name(RoIAlign)
        'roialign.op.roi_align.roi_align.RoIAlign'
        >>> resolve_class_name("path.to.MyClass")
        'path.to.MyClass'
    """
    if isinstance(clazz, str):
        return clazz

    if clazz.__name__ == "<lambda>":
        raise ValueError(
            "Resolving the full class path of lambda functions "
            "is not supported. Please define a inline function instead."
        )

    module = clazz.__module__
    if module is None or module == str.__class__.__module__:
        return clazz.__name__
    return module + "." + clazz.__name__


def class_config(
    clazz: type | Callable[..., Any] | str,  # type: ignore
    **kwargs: ArgsType,
) -> ConfigDict:
    """Creates a configuration which can be instantiated as a class.

    This function creates a configuration dict which can be passed to
    'instantiate_classes' to create a instance of the given class or functor.

    Example:
    >>> cfg = class_config(
    >>>     "roialign.op.roi_align.RoIAlign", pooled_width=7, pooled_height=7
    >>> )
    >>> print(cfg)
    >>> # Prints :
    >>> class_path: roialign.op.roi_align.RoIAlign
    >>> init_args:
    >>>   pooled_height: 7
    >>>   pooled_width: 7

    >>> op = instantiate_classes(cfg)

    Args:
        clazz (type | Callable[..., Any] | str): class type or functor or
            class string path.
        **kwargs (ArgsType): Kwargs to pass to the class constructor.

    Returns:
        ConfigDict: The class configuration.
    """
    class_path = resolve_class_name(clazz)
    if len(kwargs) == 0:
        return ConfigDict({"class_path": class_path})
    return ConfigDict(
        {"class_path": class_path, "init_args": ConfigDict(kwargs)}
    )


def instantiate_classes(data: ConfigDict | FieldReference, **kwargs: ArgsType) -> ConfigDict | Any:  # type: ignore # pylint: disable=line-too-long
    """Instantiates all classes in a given ConfigDict.

    This function iterates over the configuration data and instantiates
    all classes. Class defintions are provided by a config dict that has
    the following structure:

    {
        'class_path': 'path.to.my.class.Class',
        'init_args': ConfigDict(
            {
                'arg1': 'value1',
                'arg2': 'value2',
            }
        )
    }

    Args:
        data (ConfigDict | FieldReference): The general configuration object.
        **kwargs (ArgsType): Additional arguments to pass to the class
            constructor.

    Returns:
        ConfigDict | Any: The instantiated objects.
    """
    if isinstance(data, FieldReference):
        data = data.get()

    assert isinstance(data, ConfigDict), "Data must be a ConfigDict."

    resolved_data = copy_and_resolve_references(data)
    if len(kwargs) > 0:
        if "init_args" not in resolved_data:
            resolved_data["init_args"] = ConfigDict(kwargs)
        else:
            for k, v in kwargs.items():
                resolved_data["init_args"][k] = v

    return _instantiate_classes(resolved_data)


def copy_and_resolve_references(  # type: ignore
    data: Any, visit_map: dict[int, Any] | None = None
) -> Any:
    """Returns a ConfigDict copy with FieldReferences replaced by values.

    Note: This method is overwritten from the ConfigDict class and allows to
    also resolve FieldReferences in list, tuple and dict.

    Args:
        data (Any): object to copy.
        visit_map (dict[int, Any]): A mapping from ConfigDict object ids to
            their copy.

    Returns:
        Any: ConfigDict copy with previous FieldReferences replaced by values.
    """
    if isinstance(data, FieldReference):
        data = data.get()

    if isinstance(data, (list, tuple)):
        return type(data)(
            copy_and_resolve_references(value, visit_map) for value in data
        )

    if isinstance(data, dict):
        return {
            k: copy_and_resolve_references(v, visit_map)
            for k, v in data.items()
        }

    if not isinstance(data, ConfigDict):
        return data

    visit_map = visit_map or {}
    config_dict = ConfigDict()
    visit_map[id(config_dict)] = config_dict

    for key, value in data.items():
        if isinstance(value, FieldReference):
            value = value.get()

        if id(value) in visit_map:
            value = visit_map[id(value)]
        else:
            value = copy_and_resolve_references(value, visit_map)

        config_dict[key] = value

    return config_dict


def _instantiate_classes(data: Any) -> Any:  # type: ignore
    """Instantiates all classes in a given data.

    This is the recursive implementation of 'instantiate_classes'.

    Args:
        data (Any): The general configuration object.

    Returns:
        Any: The ConfigDict with all classes intialized. Or, if the top level
        element is a class config, the returned element will be the
        instantiated class.
    """
    if not isinstance(data, (ConfigDict, dict, list, tuple)):
        return data

    if isinstance(data, (list, tuple)):
        return type(data)(_instantiate_classes(value) for value in data)

    for key in list(data.keys()):
        value = data[key]
        if isinstance(value, (ConfigDict, dict, list, tuple)):
            if isinstance(data, ConfigDict):
                with data.ignore_type():
                    data[key] = _instantiate_classes(value)
            else:
                data[key] = _instantiate_classes(value)

    # Instantiate class
    if "class_path" in data and isinstance(data["class_path"], str):
        module_name, class_name = data["class_path"].rsplit(".", 1)
        init_args = data.get("init_args", {})

        # Convert ConfigDict to normal dictionary
        if isinstance(init_args, ConfigDict):
            init_args = init_args.to_dict()

        module = importlib.import_module(module_name)
        return getattr(module, class_name)(**init_args)

    return data
