"""\
Serialization of value objects to JSON-friendly Python structures.

These functions are the counterparts of the deserializers; they are
used by :meth:`kt.jsonmap.mapper.ObjectMapper.serialize`.

"""

import zope.component
import zope.interface
import zope.schema

import kt.jsonmap.interfaces
import kt.jsonmap.link


def link(lynk):
    ob = kt.jsonmap.interfaces.ILink(lynk)
    return ob.href


def record(mapper, ob, schema):
    """Return a dictionary containing the fields of *schema* from *ob*.

    Object fields and sequences of objects are converted using *mapper*,
    so registered serializers are applied to nested values.

    """
    d = {}
    for name, field in zope.schema.getFieldsInOrder(schema):
        d[name] = _field(mapper, field, getattr(ob, name, field.missing_value))
    return d


def _field(mapper, field, value):
    if value is None:
        return None
    if isinstance(field, zope.schema.Object):
        return mapper.serialize(value, field.schema)
    if isinstance(field, (zope.schema.List, zope.schema.Tuple)):
        if field.value_type is None:
            return list(value)
        return [_field(mapper, field.value_type, item) for item in value]
    return value


@zope.interface.implementer(kt.jsonmap.interfaces.ISerializer)
class LinkSerializer:
    """Encode a link as its href string."""

    targets = (
        kt.jsonmap.interfaces.ILink,
        kt.jsonmap.link.Link,
    )

    def serialize(self, value):
        return link(value)


def register(serializer, registry=None):
    """Register *serializer* for each of its targets.

    If *registry* is omitted, the current site manager is used.

    """
    if registry is None:
        registry = zope.component.getSiteManager()
    serializer = kt.jsonmap.interfaces.ISerializer(serializer)
    for target in serializer.targets:
        registry.registerUtility(
            serializer, kt.jsonmap.interfaces.ISerializer,
            name=kt.jsonmap.interfaces.target_name(target))


def register_defaults(registry=None):
    """Register the serializers defined in this module."""
    register(LinkSerializer(), registry=registry)


def error(error):
    r = dict()
    if error.status is not None:
        r['status'] = str(error.status)
    if error.code is not None:
        r['code'] = error.code
    if error.title is not None:
        r['title'] = error.title
    if error.detail is not None:
        r['detail'] = error.detail
    meta = dict(error.meta())
    if meta:
        r['meta'] = meta
    src = dict(error.source())
    if src:
        r['source'] = src
    return r
