"""Decorator that logs calls of functions, methods and classes to a tracker.

    tracker = Tracker()

    @track_with(tracker)
    def greet(name: str) -> str:
        return f"hi {name}"

    greet("Ann")
    tracker.assert_that("greet").was_called_once().with_(("Ann",)).and_returned("hi Ann")

Arguments are logged as a tuple in parameter order with defaults applied.
A ``*args`` parameter contributes its tuple and a ``**kwargs`` parameter its
dict. The receiver (``self``/``cls``) is never part of the logged arguments.
"""

import copy
import functools
import inspect
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from calltrack.config import get_settings
from calltrack.observability.logging import get_logger
from calltrack.payload import Payload
from calltrack.record import CallRecord
from calltrack.tracker import Tracker

logger = get_logger(__name__)

T = TypeVar("T")

TrackerResolver = Callable[[tuple[Any, ...]], Tracker]


def track_with(
    tracker: Tracker | str,
    *,
    namespace: str | None = None,
    name: str | None = None,
    exclude: Iterable[str] | str = (),
    include_receiver: bool = True,
    copy_payloads: bool | None = None,
) -> Callable[[T], T]:
    """Track calls of the decorated function, method or class.

    Args:
        tracker: The Tracker to log to, or the name of the instance attribute
            holding it. An attribute name makes the first argument the receiver.
        namespace: Key prefix; the key becomes "namespace::name". Defaults to
            the class name for classes and to no prefix for functions.
        name: Key name for a function, defaults to its ``__name__``
        exclude: Method names a class decorator leaves untracked, as an
            iterable or a comma separated string
        include_receiver: For classes, look the tracker up on the instance.
            Methods without an instance (static and class methods) are then
            skipped. Set to False and pass a Tracker to track those as well.
        copy_payloads: Deep-copy arguments and return values when logging.
            Defaults to the ``copy_payloads`` setting.

    Raises:
        TypeError: If the target or the tracker argument isn't supported
    """
    if not isinstance(tracker, (Tracker, str)):
        raise TypeError(
            f"track_with needs a Tracker or an attribute name, got {type(tracker).__name__}"
        )
    if isinstance(exclude, str):
        exclude = [part.strip() for part in exclude.split(",") if part.strip()]
    excluded = frozenset(exclude)

    def decorate(target: T) -> T:
        if inspect.isclass(target):
            return _track_class(
                target,
                tracker,
                namespace=namespace if namespace is not None else target.__name__,
                excluded=excluded,
                include_receiver=include_receiver,
                copy_payloads=copy_payloads,
            )
        if inspect.isfunction(target) or inspect.ismethod(target):
            func_name = name or target.__name__
            key = f"{namespace}::{func_name}" if namespace else func_name
            return _wrap(  # type: ignore[return-value]
                target,
                key,
                _resolver(tracker),
                skip_receiver=isinstance(tracker, str),
                copy_payloads=copy_payloads,
            )
        raise TypeError(
            "track_with only supports functions, methods and classes, "
            f"got {type(target).__name__}"
        )

    return decorate


def _resolver(tracker: Tracker | str) -> TrackerResolver:
    if isinstance(tracker, Tracker):
        return lambda _args: tracker

    def from_receiver(args: tuple[Any, ...]) -> Tracker:
        if not args:
            raise TypeError(f"Can't look up tracker attribute {tracker!r} without a receiver")
        found = getattr(args[0], tracker)
        if not isinstance(found, Tracker):
            raise TypeError(
                f"Attribute {tracker!r} of {type(args[0]).__name__} is not a Tracker"
            )
        return found

    return from_receiver


def _track_class(
    cls: T,
    tracker: Tracker | str,
    *,
    namespace: str,
    excluded: frozenset[str],
    include_receiver: bool,
    copy_payloads: bool | None,
) -> T:
    if not include_receiver and not isinstance(tracker, Tracker):
        raise TypeError("include_receiver=False needs a Tracker instance, not an attribute name")

    resolve = _resolver(tracker)
    for attr_name, member in list(vars(cls).items()):
        if attr_name.startswith("__") and attr_name.endswith("__"):
            continue
        if attr_name in excluded:
            continue
        key = f"{namespace}::{attr_name}"

        if isinstance(member, staticmethod):
            if include_receiver:
                continue
            wrapped = _wrap(member.__func__, key, resolve, False, copy_payloads)
            setattr(cls, attr_name, staticmethod(wrapped))
        elif isinstance(member, classmethod):
            if include_receiver:
                continue
            wrapped = _wrap(member.__func__, key, resolve, True, copy_payloads)
            setattr(cls, attr_name, classmethod(wrapped))
        elif inspect.isfunction(member):
            setattr(cls, attr_name, _wrap(member, key, resolve, True, copy_payloads))
        # properties and other descriptors are left alone

    return cls


def _wrap(
    func: Callable[..., Any],
    key: str,
    resolve: TrackerResolver,
    skip_receiver: bool,
    copy_payloads: bool | None,
) -> Callable[..., Any]:
    signature = inspect.signature(func)

    def capture(args: tuple[Any, ...], kwargs: dict[str, Any]) -> tuple[Any, ...] | None:
        try:
            bound = signature.bind(*args, **kwargs)
        except TypeError:
            # The call itself will raise; nothing to log.
            return None
        bound.apply_defaults()
        values = tuple(bound.arguments.values())
        if skip_receiver:
            values = values[1:]
        return _copied(values, copy_payloads)

    def log(
        args: tuple[Any, ...],
        arguments: tuple[Any, ...],
        record_returned: bool,
        returned: Any,
    ) -> None:
        record = CallRecord(
            arguments=Payload(arguments),
            returned=Payload(_copied(returned, copy_payloads)) if record_returned else None,
        )
        resolve(args).log_call(key, record)

    if inspect.iscoroutinefunction(func):

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            arguments = capture(args, kwargs)
            if arguments is None:
                return await func(*args, **kwargs)
            try:
                returned = await func(*args, **kwargs)
            except BaseException:
                log(args, arguments, False, None)
                raise
            log(args, arguments, True, returned)
            return returned

        return async_wrapper

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        arguments = capture(args, kwargs)
        if arguments is None:
            return func(*args, **kwargs)
        try:
            returned = func(*args, **kwargs)
        except BaseException:
            log(args, arguments, False, None)
            raise
        log(args, arguments, True, returned)
        return returned

    return wrapper


def _copied(value: Any, copy_payloads: bool | None) -> Any:
    if copy_payloads is None:
        copy_payloads = get_settings().copy_payloads
    if not copy_payloads:
        return value
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error) as exc:
        logger.debug("payload_not_copied", type=type(value).__name__, error=str(exc))
        return value


__all__ = ["track_with"]
