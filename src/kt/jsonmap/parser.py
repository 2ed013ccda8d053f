"""\
Pull parser presenting JSON text as a stream of tokens.

The parser is a cursor: :meth:`JsonParser.next_token` moves it forward
one token at a time, and the remaining attributes describe the token
under the cursor.  String handling and the number grammar are those of
the standard :mod:`json` module; this relies on its undocumented
helpers :func:`json.decoder.scanstring` and
:data:`json.scanner.NUMBER_RE`, which are not part of its public API.

"""

import json
import json.decoder
import json.scanner
import re

import zope.interface

import kt.jsonmap.interfaces
import kt.jsonmap.tokens


JsonToken = kt.jsonmap.tokens.JsonToken

_rx_whitespace = re.compile(r'[ \t\n\r]*')

_literals = {
    'true': JsonToken.VALUE_TRUE,
    'false': JsonToken.VALUE_FALSE,
    'null': JsonToken.VALUE_NULL,
}

# What the parser expects to find next.
_VALUE = 'value'
_VALUE_OR_END = 'value-or-end'
_NAME = 'name'
_NAME_OR_END = 'name-or-end'
_SEPARATOR_OR_END = 'separator-or-end'
_DONE = 'done'


class _Scope:

    __slots__ = 'token', 'name'

    def __init__(self, token):
        self.token = token
        self.name = None


@zope.interface.implementer(kt.jsonmap.interfaces.IDecodeCursor)
class JsonParser:
    """Token cursor over a complete JSON document."""

    def __init__(self, text):
        if isinstance(text, (bytes, bytearray)):
            try:
                text = text.decode('utf-8')
            except UnicodeDecodeError as e:
                raise kt.jsonmap.interfaces.JsonParseException(
                    f'invalid UTF-8 data: {e.reason}', e.start) from e
        self._doc = text
        self._pos = 0
        self._state = _VALUE
        self._stack = []
        self.current_token = None
        self.text = None

    @property
    def current_name(self):
        scopes = self._stack
        if self.current_token is not None \
                and self.current_token.is_structure_start:
            scopes = scopes[:-1]
        if scopes and scopes[-1].token is JsonToken.START_OBJECT:
            return scopes[-1].name
        return None

    def next_token(self):
        """Advance to the next token and return its kind.

        Returns ``None`` once the root value has been consumed; calling
        again keeps returning ``None``.

        """
        pos = self._skip_whitespace(self._pos)
        if self._state == _DONE:
            if pos < len(self._doc):
                self._fail('unexpected data after root value', pos)
            return self._set(None, None, pos)

        state = self._state
        if state == _SEPARATOR_OR_END:
            ch = self._peek(pos)
            if ch == self._closer():
                return self._close(pos)
            if ch != ',':
                self._fail(f'expected \',\' or {self._closer()!r}', pos)
            pos = self._skip_whitespace(pos + 1)
            state = _NAME if self._in_object() else _VALUE
        elif state in (_NAME_OR_END, _VALUE_OR_END):
            if self._peek(pos) == self._closer():
                return self._close(pos)
            state = _NAME if state == _NAME_OR_END else _VALUE

        if state == _NAME:
            return self._read_name(pos)
        return self._read_value(pos)

    def skip_children(self):
        token = self.current_token
        if token is None or not token.is_structure_start:
            return
        depth = 1
        while depth:
            token = self.next_token()
            if token.is_structure_start:
                depth += 1
            elif token.is_structure_end:
                depth -= 1

    # Helpers:

    def _skip_whitespace(self, pos):
        return _rx_whitespace.match(self._doc, pos).end()

    def _peek(self, pos):
        ch = self._doc[pos:pos + 1]
        if not ch:
            self._fail('unexpected end of input', pos)
        return ch

    def _fail(self, message, pos):
        raise kt.jsonmap.interfaces.JsonParseException(message, pos)

    def _in_object(self):
        return self._stack[-1].token is JsonToken.START_OBJECT

    def _closer(self):
        return '}' if self._in_object() else ']'

    def _set(self, token, text, pos):
        self.current_token = token
        self.text = text
        self._pos = pos
        return token

    def _after_value(self):
        self._state = _SEPARATOR_OR_END if self._stack else _DONE

    def _close(self, pos):
        scope = self._stack.pop()
        if scope.token is JsonToken.START_OBJECT:
            token = JsonToken.END_OBJECT
        else:
            token = JsonToken.END_ARRAY
        self._after_value()
        return self._set(token, token.value, pos + 1)

    def _open(self, token, pos):
        self._stack.append(_Scope(token))
        if token is JsonToken.START_OBJECT:
            self._state = _NAME_OR_END
        else:
            self._state = _VALUE_OR_END
        return self._set(token, token.value, pos + 1)

    def _scan_string(self, pos):
        try:
            return json.decoder.scanstring(self._doc, pos + 1)
        except json.JSONDecodeError as e:
            self._fail(e.msg, e.pos)

    def _read_name(self, pos):
        if self._peek(pos) != '"':
            self._fail('expected field name enclosed in double quotes', pos)
        name, pos = self._scan_string(pos)
        pos = self._skip_whitespace(pos)
        if self._peek(pos) != ':':
            self._fail('expected \':\' after field name', pos)
        self._stack[-1].name = name
        self._state = _VALUE
        return self._set(JsonToken.FIELD_NAME, name, pos + 1)

    def _read_value(self, pos):
        ch = self._peek(pos)
        if ch == '{':
            return self._open(JsonToken.START_OBJECT, pos)
        if ch == '[':
            return self._open(JsonToken.START_ARRAY, pos)
        if ch == '"':
            value, end = self._scan_string(pos)
            self._after_value()
            return self._set(JsonToken.VALUE_STRING, value, end)

        m = json.scanner.NUMBER_RE.match(self._doc, pos)
        if m is not None:
            integer, frac, exp = m.groups()
            if frac or exp:
                token = JsonToken.VALUE_NUMBER_FLOAT
            else:
                token = JsonToken.VALUE_NUMBER_INT
            self._after_value()
            return self._set(token, m.group(), m.end())

        for literal, token in _literals.items():
            if self._doc.startswith(literal, pos):
                self._after_value()
                return self._set(token, literal, pos + len(literal))

        self._fail('expected value', pos)
