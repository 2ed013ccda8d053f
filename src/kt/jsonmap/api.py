"""\
Flask integration: decode request bodies and report decoding failures.

"""

import json
import logging

import flask
import werkzeug.datastructures
import zope.component

import kt.jsonmap.deserializers
import kt.jsonmap.error
import kt.jsonmap.interfaces
import kt.jsonmap.mapper
import kt.jsonmap.serializers


CONTENT_TYPE = 'application/json'
"""Media type of error responses."""

_log = logging.getLogger(__name__)


def mapper():
    """Get the object mapper for the current Flask request.

    A new mapper will be created if needed.  At most one mapper will be
    associated with each request.

    If the ``'KT_JSONMAP_MAPPER'`` setting is specified in
    ``flask.current_app.config``, it should be a factory for a mapper
    object.  This will normally be derived from
    :class:`~kt.jsonmap.mapper.ObjectMapper`.  The factory is called
    with the value of the ``'KT_JSONMAP_FAIL_ON_UNKNOWN_FIELDS'``
    setting (default ``True``) as the *fail_on_unknown_fields* keyword
    argument.

    """
    try:
        return flask.g.__jsonmap_mapper
    except AttributeError:
        # pass & fall through to avoid the confusing chained exception
        # when things go wrong building the mapper.
        pass
    config = flask.current_app.config
    factory = config.get('KT_JSONMAP_MAPPER', kt.jsonmap.mapper.ObjectMapper)
    ob = factory(fail_on_unknown_fields=config.get(
        'KT_JSONMAP_FAIL_ON_UNKNOWN_FIELDS', True))
    flask.g.__jsonmap_mapper = ob
    return ob


def read_request(target):
    """Decode the body of the current request as *target*.

    Exceptions from decoding are propagated; :func:`init_app` installs
    handlers that turn them into error responses.

    """
    return mapper().read_value(flask.request.get_data(), target)


def error(exc, headers=None):
    """Generate error response from exception.

    *exc* is adapted to :class:`~kt.jsonmap.interfaces.IError` using the
    registry of the request's mapper, falling back to normal adaptation.

    If *headers* is given and non-``None``, it must be be mapping of
    additional headers that should be returned in the request.  If a
    **Content-Type** header is provided, it will be used instead of
    the default value.

    """
    err = mapper().registry.queryAdapter(exc, kt.jsonmap.interfaces.IError)
    if err is None:
        err = kt.jsonmap.interfaces.IError(exc)
    status = err.status or 500
    _log.debug('rejecting request to %s with status %s: %s',
               flask.request.path, status, exc)
    body = dict(errors=[kt.jsonmap.serializers.error(err)])
    data = json.dumps(body).encode('utf-8')
    hdrs = werkzeug.datastructures.Headers()
    if headers is not None:
        hdrs.extend(headers)
    if 'Content-Type' not in hdrs:
        hdrs['Content-Type'] = CONTENT_TYPE
    return flask.make_response(data, status, hdrs)


def init_app(app, registry=None):
    """Prepare *app* for decoding request bodies.

    Error handlers for decoding exceptions are installed on *app*, and
    the default deserializers, serializers and error adapters are
    registered in *registry*.  If *registry* is omitted, the current
    site manager is used; it should be the registry used by the mappers
    produced for the application.

    """
    if registry is None:
        registry = zope.component.getSiteManager()
    kt.jsonmap.deserializers.register_defaults(registry)
    kt.jsonmap.serializers.register_defaults(registry)
    kt.jsonmap.error.register(registry)
    app.register_error_handler(
        kt.jsonmap.interfaces.MappingException, error)
    app.register_error_handler(
        kt.jsonmap.interfaces.JsonParseException, error)
