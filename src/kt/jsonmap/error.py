"""\
Definition of a convenient :class:`~kt.jsonmap.interfaces.IError`
implementation, and adapters from decoding exceptions.

"""

import typing

import zope.component
import zope.interface

import kt.jsonmap.interfaces


@zope.interface.implementer(kt.jsonmap.interfaces.IError)
class Error:
    """Representation of a single error."""

    def __init__(self,
                 status: typing.Optional[int] = None,
                 code: typing.Optional[str] = None,
                 title: typing.Optional[str] = None,
                 detail: typing.Optional[str] = None,
                 pointer: typing.Optional[str] = None,
                 meta: typing.Optional[dict] = None):
        """Initialize error structure.

        :param status: HTTP response status code.
        :param code: Application-specific code for the kind of error.
        :param title:
            Human-oriented high-level description of the kind of error.
            This should not be instance specific.
        :param detail:
            Human-oriented description of the problem; may contain
            instance-specific details.
        :param pointer:
            JSON Pointer referring to part of a request document which
            caused the error.
            Used to populate the ``source`` object in the error object.
        :param meta:
            Mapping providing non-standard fields of additional data
            that should be serialized as the ``meta`` member of the error.

        """
        self.status = status
        self.code = code
        self.title = title
        self.detail = detail
        self._pointer = pointer
        self._meta = meta or {}

    def meta(self):
        """Return metadata for this error.

        This returns a dictionary with the content passed to the
        constructor as *meta*, if any.  Otherwise, returns an empty
        dictionary.

        """
        return dict(self._meta)

    def source(self):
        """Return error source information.

        This uses the *pointer* argument to the constructor to identify
        the error source.  An empty pointer refers to the whole document.

        """
        d = {}
        if self._pointer is not None:
            d['pointer'] = self._pointer
        return d


@zope.component.adapter(kt.jsonmap.interfaces.IMappingException)
@zope.interface.implementer(kt.jsonmap.interfaces.IError)
def mappingError(exc):
    """Adapt mapping exception to an
    :class:`~kt.jsonmap.interfaces.IError`.

    :param exc: Exception object to adapt.

    """
    return Error(
        status=400,
        title=(exc.__doc__ or '').strip() or None,
        detail=str(exc),
        pointer=exc.path,
        meta=dict(target_type=kt.jsonmap.interfaces.target_name(exc.target)),
    )


@zope.component.adapter(kt.jsonmap.interfaces.IJsonParseException)
@zope.interface.implementer(kt.jsonmap.interfaces.IError)
def parseError(exc):
    """Adapt JSON parse exception to an
    :class:`~kt.jsonmap.interfaces.IError`.

    :param exc: Exception object to adapt.

    """
    return Error(
        status=400,
        title=(exc.__doc__ or '').strip() or None,
        detail=str(exc),
        meta=dict(position=exc.position),
    )


def register(registry=None):
    """Register the exception adapters defined in this module.

    If *registry* is omitted, the current site manager is used.

    """
    if registry is None:
        registry = zope.component.getSiteManager()
    registry.registerAdapter(mappingError)
    registry.registerAdapter(parseError)
