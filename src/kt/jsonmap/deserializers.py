"""\
Deserializers for value types provided by this package.

Deserializers are registered as named
:class:`~kt.jsonmap.interfaces.IDeserializer` utilities; the name is the
dotted name of the target, as computed by
:func:`~kt.jsonmap.interfaces.target_name`.

"""

import zope.component
import zope.interface

import kt.jsonmap.interfaces
import kt.jsonmap.link


@zope.interface.implementer(kt.jsonmap.interfaces.IDeserializer)
class LinkDeserializer:
    """Decode a scalar token as a :class:`~kt.jsonmap.link.Link`.

    Any scalar value is accepted, not only strings; the link is built
    from the cursor text for the token, so ``123`` produces a link with
    an href of ``'123'``.  Structural tokens are rejected.

    """

    targets = (
        kt.jsonmap.interfaces.ILink,
        kt.jsonmap.link.Link,
    )

    def deserialize(self, cursor, context):
        token = cursor.current_token
        if token is not None and token.is_scalar_value:
            return kt.jsonmap.link.Link(cursor.text)
        raise context.mapping_exception(kt.jsonmap.link.Link)


def register(deserializer, registry=None):
    """Register *deserializer* for each of its targets.

    If *registry* is omitted, the current site manager is used.

    """
    if registry is None:
        registry = zope.component.getSiteManager()
    deserializer = kt.jsonmap.interfaces.IDeserializer(deserializer)
    for target in deserializer.targets:
        registry.registerUtility(
            deserializer, kt.jsonmap.interfaces.IDeserializer,
            name=kt.jsonmap.interfaces.target_name(target))


def register_defaults(registry=None):
    """Register the deserializers defined in this module."""
    register(LinkDeserializer(), registry=registry)
