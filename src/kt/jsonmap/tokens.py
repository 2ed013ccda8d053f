"""\
Token kinds reported by a decoding cursor.

"""

import enum


class JsonToken(enum.Enum):
    """Kind of the token currently under a
    :class:`~kt.jsonmap.interfaces.IDecodeCursor`.

    """

    START_OBJECT = '{'
    END_OBJECT = '}'
    START_ARRAY = '['
    END_ARRAY = ']'
    FIELD_NAME = 'field-name'
    VALUE_STRING = 'string'
    VALUE_NUMBER_INT = 'integer'
    VALUE_NUMBER_FLOAT = 'float'
    VALUE_TRUE = 'true'
    VALUE_FALSE = 'false'
    VALUE_NULL = 'null'

    @property
    def is_scalar_value(self):
        """True for tokens representing a single primitive value."""
        return self.name.startswith('VALUE_')

    @property
    def is_structure_start(self):
        return self in (JsonToken.START_OBJECT, JsonToken.START_ARRAY)

    @property
    def is_structure_end(self):
        return self in (JsonToken.END_OBJECT, JsonToken.END_ARRAY)
