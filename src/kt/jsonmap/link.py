"""\
Implementation of a simple link value.

"""

import zope.interface

import kt.jsonmap.interfaces


@zope.interface.implementer(kt.jsonmap.interfaces.ILink)
class Link:
    """Immutable reference to a resource by URI or URL.

    The *href* text is stored exactly as given; no validation or
    normalization is performed.

    """

    __slots__ = '_href',

    def __init__(self, href):
        object.__setattr__(self, '_href', href)

    @property
    def href(self):
        return self._href

    def __setattr__(self, name, value):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __delattr__(self, name):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def __eq__(self, other):
        if other.__class__ is not self.__class__:
            return NotImplemented
        return self._href == other._href

    def __hash__(self):
        return hash((self.__class__, self._href))

    def __repr__(self):
        return f'{self.__class__.__name__}({self._href!r})'
