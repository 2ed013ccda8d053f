"""\
Mapping between JSON text and application objects.

Decoding is driven by targets: interfaces or classes for which an
:class:`~kt.jsonmap.interfaces.IDeserializer` utility has been
registered.  Interfaces defining :mod:`zope.schema` fields can also be
used without a registered deserializer; JSON objects are then mapped
field by field onto a :class:`Record` providing the interface.

"""

import json
import logging

import zope.component
import zope.interface
import zope.interface.interfaces
import zope.schema

import kt.jsonmap.interfaces
import kt.jsonmap.parser
import kt.jsonmap.serializers
import kt.jsonmap.tokens


JsonToken = kt.jsonmap.tokens.JsonToken

_log = logging.getLogger(__name__)


def _is_schema(target):
    return (zope.interface.interfaces.IInterface.providedBy(target)
            and bool(zope.schema.getFields(target)))


def _pointer(segments):
    # RFC 6901 encoding of a sequence of reference tokens.
    return ''.join('/' + str(segment).replace('~', '~0').replace('/', '~1')
                   for segment in segments)


class Record:
    """Object holding field values decoded for a schema interface."""

    def __init__(self, schema, /, **values):
        self.__dict__.update(values)
        zope.interface.alsoProvides(self, schema)

    def __repr__(self):
        fields = ', '.join(f'{name}={value!r}'
                           for name, value in sorted(self.__dict__.items())
                           if not name.startswith('_'))
        return f'<{self.__class__.__name__} {fields}>'


@zope.interface.implementer(kt.jsonmap.interfaces.IDeserializationContext)
class DeserializationContext:
    """State for decoding a single JSON document.

    The cursor is expected to be positioned at the first token of a
    value when :meth:`read_value` is called, and is left positioned at
    the last token of that value.

    """

    def __init__(self, mapper, cursor):
        self.mapper = mapper
        self._cursor = cursor
        self._path = []

    @property
    def path(self):
        return _pointer(self._path)

    def mapping_exception(self, target, message=None):
        return kt.jsonmap.interfaces.MappingException(
            target, message=message, path=self.path)

    def read_value(self, target):
        name = kt.jsonmap.interfaces.target_name(target)
        deserializer = self.mapper.registry.queryUtility(
            kt.jsonmap.interfaces.IDeserializer, name=name)
        if deserializer is not None:
            return deserializer.deserialize(self._cursor, self)
        if _is_schema(target):
            _log.debug('no deserializer registered for %s;'
                       ' mapping fields individually', name)
            return self._read_record(target)
        raise zope.interface.interfaces.ComponentLookupError(
            kt.jsonmap.interfaces.IDeserializer, name)

    def _read_record(self, schema):
        cursor = self._cursor
        if cursor.current_token is JsonToken.VALUE_NULL:
            return None
        if cursor.current_token is not JsonToken.START_OBJECT:
            raise self.mapping_exception(schema)

        fields = dict(zope.schema.getFieldsInOrder(schema))
        values = {}
        while cursor.next_token() is JsonToken.FIELD_NAME:
            name = cursor.text
            cursor.next_token()
            self._path.append(name)
            try:
                field = fields.get(name)
                if field is None:
                    if self.mapper.fail_on_unknown_fields:
                        raise kt.jsonmap.interfaces.UnrecognizedField(
                            schema, name, path=self.path)
                    cursor.skip_children()
                else:
                    values[name] = self._read_field(schema, field)
            finally:
                self._path.pop()

        for name, field in fields.items():
            if name in values:
                continue
            if field.required:
                raise kt.jsonmap.interfaces.MissingField(
                    schema, name, path=self.path)
            values[name] = field.default
        return Record(schema, **values)

    def _read_field(self, schema, field):
        if isinstance(field, zope.schema.Object):
            value = self.read_value(field.schema)
        elif isinstance(field, (zope.schema.List, zope.schema.Tuple)):
            value = self._read_sequence(schema, field)
        else:
            value = self._read_scalar(field)
        try:
            field.validate(value)
        except zope.schema.ValidationError as e:
            raise self.mapping_exception(
                schema, f'invalid value: {e.doc()}'
            ) from e
        return value

    def _read_sequence(self, schema, field):
        cursor = self._cursor
        if cursor.current_token is JsonToken.VALUE_NULL:
            return field.missing_value
        if cursor.current_token is not JsonToken.START_ARRAY:
            raise self.mapping_exception(field._type)

        items = []
        while cursor.next_token() is not JsonToken.END_ARRAY:
            self._path.append(len(items))
            try:
                if field.value_type is None:
                    items.append(self._read_scalar(None))
                else:
                    items.append(self._read_field(schema, field.value_type))
            finally:
                self._path.pop()
        if isinstance(field, zope.schema.Tuple):
            return tuple(items)
        return items

    def _read_scalar(self, field):
        cursor = self._cursor
        token = cursor.current_token
        if not token.is_scalar_value:
            target = getattr(field, '_type', None)
            if not isinstance(target, type):
                target = type(field)
            raise self.mapping_exception(target)

        text = cursor.text
        if token is JsonToken.VALUE_NULL:
            return None if field is None else field.missing_value
        if token is JsonToken.VALUE_TRUE:
            return True
        if token is JsonToken.VALUE_FALSE:
            return False
        if token is JsonToken.VALUE_STRING:
            return text
        if (token is JsonToken.VALUE_NUMBER_FLOAT
                or isinstance(field, zope.schema.Float)):
            convert = float
        else:
            convert = int
        try:
            return convert(text)
        except ValueError as e:
            raise self.mapping_exception(
                convert, f'cannot convert number: {e}') from e


class ObjectMapper:
    """Entry point for reading and writing JSON documents.

    :param registry:
        Component registry used to look up deserializers and
        serializers.  Defaults to the current site manager.
    :param fail_on_unknown_fields:
        If true, JSON object members that are not defined by the target
        schema cause :exc:`~kt.jsonmap.interfaces.UnrecognizedField` to
        be raised.  Otherwise such members are skipped.

    """

    def __init__(self, registry=None, fail_on_unknown_fields=True):
        if registry is None:
            registry = zope.component.getSiteManager()
        self.registry = registry
        self.fail_on_unknown_fields = fail_on_unknown_fields

    def read_value(self, text, target):
        """Decode the JSON document *text* as *target*.

        *text* may be a string or UTF-8 encoded bytes.  Malformed JSON
        raises :exc:`~kt.jsonmap.interfaces.JsonParseException`; JSON
        that cannot be mapped onto *target* raises
        :exc:`~kt.jsonmap.interfaces.MappingException`.

        """
        cursor = kt.jsonmap.parser.JsonParser(text)
        cursor.next_token()
        context = DeserializationContext(self, cursor)
        value = context.read_value(target)
        if cursor.next_token() is not None:
            raise context.mapping_exception(
                target, 'value was not completely consumed')
        return value

    def serialize(self, value, target=None):
        """Convert *value* to a JSON-friendly Python structure.

        *target* defaults to the class of *value*; it must be given for
        records.

        """
        if target is None:
            target = type(value)
        name = kt.jsonmap.interfaces.target_name(target)
        serializer = self.registry.queryUtility(
            kt.jsonmap.interfaces.ISerializer, name=name)
        if serializer is not None:
            return serializer.serialize(value)
        if _is_schema(target):
            return kt.jsonmap.serializers.record(self, value, target)
        return value

    def write_value(self, value, target=None):
        """Return the JSON text for *value*."""
        return json.dumps(self.serialize(value, target))
