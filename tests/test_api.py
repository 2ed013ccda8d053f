"""\
Tests for kt.jsonmap.api.

"""

import functools

import flask
import zope.interface.registry

import kt.jsonmap.api
import kt.jsonmap.error
import kt.jsonmap.interfaces
import kt.jsonmap.link
import kt.jsonmap.mapper
import tests.objects
import tests.utils


class RequestTestCase(tests.utils.FlaskTestCase):

    def setUp(self):
        super(RequestTestCase, self).setUp()

        @self.app.route('/bookmarks', methods=['POST'])
        def create_bookmark():
            bookmark = kt.jsonmap.api.read_request(tests.objects.IBookmark)
            body = dict(title=bookmark.title, target=bookmark.target.href)
            return flask.jsonify(body), 201

        @self.app.route('/links', methods=['POST'])
        def create_link():
            link = kt.jsonmap.api.read_request(kt.jsonmap.link.Link)
            return flask.jsonify(dict(href=link.href)), 201

    def test_link_body(self):
        response = self.http_post('/links', data='"http://example.com/a"')
        self.assertEqual(response.get_json(),
                         dict(href='http://example.com/a'))

    def test_numeric_link_body(self):
        response = self.http_post('/links', data='123')
        self.assertEqual(response.get_json(), dict(href='123'))

    def test_record_body(self):
        response = self.http_post(
            '/bookmarks',
            data='{"title": "Home", "target": "http://example.com/"}')
        self.assertEqual(response.get_json(),
                         dict(title='Home', target='http://example.com/'))

    def test_structural_link(self):
        response = self.http_post(
            '/bookmarks', status=400,
            data='{"title": "Home", "target": {"href": "/"}}')
        self.assertEqual(response.headers['Content-Type'],
                         kt.jsonmap.api.CONTENT_TYPE)
        errors = response.get_json()['errors']
        self.assertEqual(len(errors), 1)
        error = errors[0]
        self.assertEqual(error['status'], '400')
        self.assertEqual(error['source'], dict(pointer='/target'))
        self.assertEqual(error['meta'],
                         dict(target_type='kt.jsonmap.link.Link'))
        self.assertIn('cannot map token stream', error['detail'])

    def test_malformed_body(self):
        response = self.http_post('/links', status=400, data='"/a')
        error = response.get_json()['errors'][0]
        self.assertEqual(error['status'], '400')
        self.assertEqual(error['meta'], dict(position=0))

    def test_malformed_record_body(self):
        response = self.http_post('/bookmarks', status=400,
                                  data='{"title": "Home", "target": "/"')
        error = response.get_json()['errors'][0]
        self.assertEqual(error['meta'], dict(position=31))

    def test_structure_rejected_before_parse_error(self):
        # The link is rejected at the array start; the truncated tail
        # is never read.
        response = self.http_post('/links', status=400, data='["/a"')
        error = response.get_json()['errors'][0]
        self.assertEqual(error['meta'],
                         dict(target_type='kt.jsonmap.link.Link'))
        self.assertEqual(error['source'], dict(pointer=''))

    def test_empty_body(self):
        response = self.http_post('/links', status=400, data='')
        error = response.get_json()['errors'][0]
        self.assertIn('unexpected end of input', error['detail'])

    def test_unknown_fields_rejected_by_default(self):
        response = self.http_post(
            '/bookmarks', status=400,
            data='{"title": "Home", "target": "/", "color": "red"}')
        error = response.get_json()['errors'][0]
        self.assertEqual(error['source'], dict(pointer='/color'))

    def test_unknown_fields_allowed_by_config(self):
        self.app.config['KT_JSONMAP_FAIL_ON_UNKNOWN_FIELDS'] = False
        response = self.http_post(
            '/bookmarks',
            data='{"title": "Home", "target": "/", "color": "red"}')
        self.assertEqual(response.get_json(), dict(title='Home', target='/'))


class MapperTestCase(tests.utils.FlaskTestCase):

    def test_one_mapper_per_request(self):
        with self.request_context('/'):
            mapper = kt.jsonmap.api.mapper()
            self.assertIs(kt.jsonmap.api.mapper(), mapper)
            self.assertIs(mapper.registry, self.registry)
            self.assertTrue(mapper.fail_on_unknown_fields)
        with self.request_context('/'):
            self.assertIsNot(kt.jsonmap.api.mapper(), mapper)

    def test_default_factory(self):
        del self.app.config['KT_JSONMAP_MAPPER']
        with self.request_context('/'):
            mapper = kt.jsonmap.api.mapper()
        self.assertIsInstance(mapper, kt.jsonmap.mapper.ObjectMapper)


class ErrorResponseTestCase(tests.utils.FlaskTestCase):

    def test_custom_headers(self):
        exc = kt.jsonmap.interfaces.MappingException(kt.jsonmap.link.Link)
        with self.request_context('/'):
            response = kt.jsonmap.api.error(
                exc, headers={'Content-Type': 'application/problem+json',
                              'X-Request-Id': 'abc'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.headers['Content-Type'],
                         'application/problem+json')
        self.assertEqual(response.headers['X-Request-Id'], 'abc')

    def test_error_without_status(self):
        err = kt.jsonmap.error.Error(title='Something broke')
        with self.request_context('/'):
            response = kt.jsonmap.api.error(err)
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.get_json(),
                         dict(errors=[dict(title='Something broke')]))


class InitAppTestCase(tests.utils.JSONMapTestCase):

    def test_registers_defaults(self):
        registry = zope.interface.registry.Components()
        app = flask.Flask(__name__)
        app.config['KT_JSONMAP_MAPPER'] = functools.partial(
            kt.jsonmap.mapper.ObjectMapper, registry=registry)
        kt.jsonmap.api.init_app(app, registry=registry)

        @app.route('/links', methods=['POST'])
        def create_link():
            link = kt.jsonmap.api.read_request(kt.jsonmap.interfaces.ILink)
            return flask.jsonify(dict(href=link.href)), 201

        client = app.test_client()
        response = client.post('/links', data='"/a"')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json(), dict(href='/a'))

        response = client.post('/links', data='{}')
        self.assertEqual(response.status_code, 400)
        error = response.get_json()['errors'][0]
        self.assertEqual(error['meta'],
                         dict(target_type='kt.jsonmap.link.Link'))

        self.assertIsNotNone(registry.queryUtility(
            kt.jsonmap.interfaces.ISerializer,
            name='kt.jsonmap.link.Link'))
