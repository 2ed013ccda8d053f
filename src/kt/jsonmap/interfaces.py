"""\
Interfaces for mapping JSON token streams onto application objects.

"""

import typing

import zope.interface
import zope.interface.common.interfaces
import zope.interface.common.mapping
import zope.interface.interfaces
import zope.schema

import kt.jsonmap.tokens


def target_name(target):
    """Return the dotted name used to identify a mapping target.

    *target* may be an interface or a class.

    """
    if zope.interface.interfaces.IInterface.providedBy(target):
        return target.__identifier__
    if isinstance(target, type):
        return f'{target.__module__}.{target.__qualname__}'
    return str(target)


# --------------------
# Exception interfaces


class IMappingException(zope.interface.common.interfaces.IValueError):
    """Interface for MappingException instances."""

    target = zope.interface.Attribute(
        'Interface or class the token stream could not be mapped to')

    path = zope.schema.TextLine(
        title='Path',
        description='JSON Pointer to the value that could not be mapped',
        required=True,
    )


class IJsonParseException(zope.interface.common.interfaces.IValueError):
    """Interface for JsonParseException instances."""

    position = zope.schema.Int(
        title='Position',
        description='Character offset in the JSON text',
        min=0,
        required=True,
    )


# ----------
# Exceptions


@zope.interface.implementer(IMappingException)
class MappingException(ValueError):
    """Token stream cannot be mapped to the requested type."""

    def __init__(self, target, message=None, path=''):
        """Construct exception for a specific *target*.

        If *message* is not given, a generic message naming the target
        is generated.  *path* is a JSON Pointer to the offending value.

        """
        super(MappingException, self).__init__(message)
        self.target = target
        self.message = message
        self.path = path

    def __str__(self):
        message = self.message
        if not message:
            message = f'cannot map token stream to {target_name(self.target)}'
        if self.path:
            message = f'{message} (at {self.path!r})'
        return message


class UnrecognizedField(MappingException):
    """JSON object contains a member not defined by the target schema."""

    def __init__(self, target, field, path=''):
        super(UnrecognizedField, self).__init__(
            target,
            f'unrecognized field {field!r} for {target_name(target)}',
            path=path)
        self.field = field


class MissingField(MappingException):
    """JSON object lacks a member required by the target schema."""

    def __init__(self, target, field, path=''):
        super(MissingField, self).__init__(
            target,
            f'missing required field {field!r} for {target_name(target)}',
            path=path)
        self.field = field


@zope.interface.implementer(IJsonParseException)
class JsonParseException(ValueError):
    """JSON text is malformed."""

    def __init__(self, message, position):
        """Initialize with an error message and the offending offset."""
        super(JsonParseException, self).__init__(message)
        self.position = position

    def __str__(self):
        return f'{self.args[0]} (at offset {self.position})'


# -----------------
# Field definitions


class URL(zope.schema.Text):

    def __init__(self, title=None, description=None, **kwargs):
        kwargs.update(
            title=(title or 'URL'),
            description=(description or 'Absolute or relative URL'),
        )
        super(URL, self).__init__(**kwargs)


# ------------
# Value types


class ILink(zope.interface.Interface):
    """Reference to a resource by URI or URL.

    The reference text is carried as-is; it is not required to be a
    well-formed URL.

    """

    href = URL(
        min_length=0,
        required=True,
        readonly=True,
    )


# ------------------------
# Token stream consumption


class IDecodeCursor(zope.interface.Interface):
    """Position within an in-progress JSON token stream."""

    current_token = zope.interface.Attribute(
        'current_token',
        ':class:`~kt.jsonmap.tokens.JsonToken` under the cursor, or'
        ' ``None`` before the first token and after the last.')

    text = zope.interface.Attribute(
        'text',
        'Textual rendering of the current token.  Strings and field'
        ' names are unescaped; numbers are given as they appear in the'
        ' source.')

    current_name = zope.interface.Attribute(
        'current_name',
        'Name of the object member owning the current token, or'
        ' ``None``.')

    def next_token() -> typing.Optional[kt.jsonmap.tokens.JsonToken]:
        """Advance to the next token and return its kind.

        Returns ``None`` once the root value has been consumed.

        """

    def skip_children():
        """Advance to the end of the structure started by the current token.

        Does nothing unless the current token starts an object or array.

        """


class IDeserializationContext(zope.interface.Interface):
    """Decoding session handle passed to deserializers."""

    path = zope.schema.TextLine(
        title='Path',
        description='JSON Pointer to the value being decoded',
        required=True,
        readonly=True,
    )

    def mapping_exception(target, message=None) -> MappingException:
        """Build an exception reporting that the current token cannot be
        mapped to *target*.

        The exception is returned, not raised.

        """

    def read_value(target):
        """Decode the value starting at the current token as *target*."""


class IDeserializer(zope.interface.Interface):
    """Decoding strategy for one or more target types."""

    targets = zope.interface.Attribute(
        'targets', 'Sequence of interfaces or classes served.')

    def deserialize(cursor: IDecodeCursor,
                    context: IDeserializationContext):
        """Decode the value starting at the current token of *cursor*.

        Failures are signalled by raising the result of
        :meth:`IDeserializationContext.mapping_exception`.

        """


class ISerializer(zope.interface.Interface):
    """Encoding strategy producing JSON-friendly Python structures."""

    targets = zope.interface.Attribute(
        'targets', 'Sequence of interfaces or classes served.')

    def serialize(value):
        """Return a JSON-encodable representation of *value*."""


# ---------
# Reporting


class IFieldMapping(zope.interface.common.mapping.IEnumerableMapping):
    """Mapping from field names to JSON-encodable values."""


class IError(zope.interface.Interface):
    """Presentation of a single error."""

    status = zope.schema.Int(
        title='Status code',
        description='HTTP status code',
        min=400,
        max=599,
        required=False,
        missing_value=None,
    )

    code = zope.schema.TextLine(
        title='Code',
        description='Error code identifying the specific application error',
        required=False,
        missing_value=None,
    )

    title = zope.schema.TextLine(
        title='Title',
        description='Human-facing title describing the application error',
        required=False,
        missing_value=None,
    )

    detail = zope.schema.Text(
        title='Detailed description',
        description='Human-facing description of this instance of the problem',
        required=False,
        missing_value=None,
    )

    def meta() -> IFieldMapping:
        """Retrieve a mapping containing non-standard, named metadata fields.

        The mapping may be empty.

        """

    def source() -> IFieldMapping:
        """Returns mapping containing references to the source of the error.

        The mapping may be empty.

        """
