"""\
Tests support for kt.jsonmap tests.

"""

import functools
import unittest

import flask
import zope.interface.registry

import kt.jsonmap.api
import kt.jsonmap.deserializers
import kt.jsonmap.error
import kt.jsonmap.mapper
import kt.jsonmap.parser
import kt.jsonmap.serializers


class JSONMapTestCase(unittest.TestCase):

    def setUp(self):
        super(JSONMapTestCase, self).setUp()
        #
        # Use our own registry to avoid polluting the global site
        # manager in tests.
        #
        self.registry = zope.interface.registry.Components()
        kt.jsonmap.deserializers.register_defaults(self.registry)
        kt.jsonmap.serializers.register_defaults(self.registry)
        kt.jsonmap.error.register(self.registry)
        self.mapper = kt.jsonmap.mapper.ObjectMapper(registry=self.registry)

    def cursor(self, text, advance=1):
        """Return a parser for *text*, advanced by *advance* tokens."""
        cursor = kt.jsonmap.parser.JsonParser(text)
        for _ in range(advance):
            cursor.next_token()
        return cursor

    def context(self, cursor):
        return kt.jsonmap.mapper.DeserializationContext(self.mapper, cursor)


class FlaskTestCase(JSONMapTestCase):

    def setUp(self):
        super(FlaskTestCase, self).setUp()
        self.app = flask.Flask(__name__)
        self.app.config['TESTING'] = True
        self.app.config['KT_JSONMAP_MAPPER'] = functools.partial(
            kt.jsonmap.mapper.ObjectMapper, registry=self.registry)
        kt.jsonmap.api.init_app(self.app, registry=self.registry)
        self.client = self.app.test_client()

    def request_context(self, *args, **kwargs):
        return self.app.test_request_context(*args, **kwargs)

    def http_post(self, path, status=201, **kwargs):
        response = self.client.post(path, **kwargs)
        if status:
            self.assertEqual(
                response.status_code, status,
                f'POST {path} status {response.status_code}, expected {status}'
            )
        return response
