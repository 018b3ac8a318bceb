"""
Unit tests for pyelastomer

Most of these fake the server. Those built on ``ElasticSearchTestCase``
require a local server running on the default port (localhost:9200) and skip
themselves when there isn't one.
"""
from unittest import TestCase, SkipTest

import simplejson as json

# Test that __all__ is sufficient:
from pyelastomer import *


def fake_bulk_response(method, path_components, body=None, query_params=None):
    """
    Stand in for ``Client.send_request()`` on bulk calls, returning one
    successful item per action in ``body``, in order.
    """
    items = []
    lines = iter(body.splitlines())
    for line in lines:
        (action, meta), = json.loads(line).items()
        status = {'delete': 200, 'update': 200}.get(action, 201)
        items.append({action: dict(meta, status=status)})
        if action != 'delete':
            next(lines)  # the document
    return {'took': 3, 'items': items}


class ElasticSearchTestCase(TestCase):
    @classmethod
    def setUpClass(cls):
        """Wait for the server to come up, or skip."""
        cls.conn = Client()

        try:
            cls.conn.cluster.health(wait_for_status='yellow', timeout='10s')
        except (ConnectionError, Timeout, ElasticHttpError):
            raise SkipTest('Could not connect to the server.')

    def tearDown(self):
        try:
            self.conn.delete_index('test-index')
        except ElasticHttpError:
            pass

    def assert_result_contains(self, result, expected):
        for (key, value) in expected.items():
            self.assertEqual(value, result[key])
        return True
