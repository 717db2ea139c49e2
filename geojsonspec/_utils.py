# type: ignore
import typing


def get_origin_class(obj):
    """The class behind a (possibly parametrized) generic type, or None."""
    if isinstance(obj, type):
        return obj
    origin = getattr(obj, "__origin__", None)
    return origin if isinstance(origin, type) else None


def _get_class_mro_and_typevar_mappings(obj):
    mapping = {}

    if isinstance(obj, type):
        cls = obj
    else:
        cls = obj.__origin__

    def inner(c, scope):
        if isinstance(c, type):
            cls = c
        else:
            cls = c.__origin__
            if cls in (object, typing.Generic):
                return
            if cls not in mapping:
                # Substitute parameters bound further down the hierarchy
                args = tuple(scope.get(a, a) for a in c.__args__)
                mapping[cls] = dict(zip(cls.__parameters__, args))

        if issubclass(cls, typing.Generic):
            bases = getattr(cls, "__orig_bases__", cls.__bases__)
            for b in bases:
                inner(b, mapping.get(cls, {}))

    inner(obj, {})
    return cls.__mro__, mapping


def get_type_params(obj, generic, defaults):
    """Get the type arguments ``obj`` binds for the generic class ``generic``.

    ``obj`` may be ``generic`` itself, a parametrization like
    ``generic[int, str]``, or a (parametrized) subclass of either. Parameters
    left unbound are replaced by the matching entry in ``defaults``.

    Returns
    -------
    cls : type
        The class to instantiate.
    args : tuple
        The resolved type arguments, in the order of ``generic.__parameters__``.
    """
    mro, mapping = _get_class_mro_and_typevar_mappings(obj)
    if generic not in mro:
        raise TypeError(f"{obj!r} is not a subclass of {generic.__qualname__}")
    bound = mapping.get(generic, {})
    args = []
    for param, default in zip(generic.__parameters__, defaults):
        value = bound.get(param, param)
        args.append(default if isinstance(value, typing.TypeVar) else value)
    return mro[0], tuple(args)
