from collections.abc import Mapping

from pyelastomer.utils import es_kwargs


class Cluster(object):
    """
    API calls that pertain to the cluster as a whole: health, state,
    settings, shard allocation, and index aliases

    You don't make one of these yourself; use the ``cluster`` attribute of a
    :class:`~pyelastomer.Client`::

        es.cluster.health(wait_for_status='yellow', timeout='10s')

    Every call returns the decoded JSON response as is.
    """
    def __init__(self, client):
        """
        :arg client: The :class:`~pyelastomer.Client` used for HTTP requests
        """
        self.client = client

    def _send(self, *args, **kwargs):
        return self.client.send_request(*args, **kwargs)

    @es_kwargs('level', 'local', 'wait_for_status', 'wait_for_nodes',
               'wait_for_relocating_shards', 'wait_for_active_shards',
               'timeout', 'master_timeout')
    def health(self, index=None, query_params=None):
        """
        Report on the health of the cluster or certain indices.

        :arg index: The index or iterable of indexes to examine
        :arg wait_for_status: Block until the cluster reaches this status:
            'green', 'yellow', or 'red'
        :arg timeout: How long to wait for ``wait_for_status`` and friends,
            like "10s"
        """
        return self._send('GET',
                          ['_cluster', 'health', self.client._concat(index)],
                          query_params=query_params)

    @es_kwargs('local', 'master_timeout', 'filter_nodes',
               'filter_routing_table', 'filter_metadata', 'filter_blocks',
               'filter_indices')
    def state(self, query_params=None):
        """
        Return comprehensive state information about the whole cluster.

        (Insert es_kwargs here.)
        """
        return self._send('GET', ['_cluster', 'state'],
                          query_params=query_params)

    @es_kwargs('flat_settings', 'master_timeout', 'timeout')
    def settings(self, query_params=None):
        """
        Return the cluster-wide settings that have been changed through
        :meth:`update_settings()`.

        (Insert es_kwargs here.)
        """
        return self._send('GET', ['_cluster', 'settings'],
                          query_params=query_params)

    @es_kwargs('flat_settings', 'master_timeout', 'timeout')
    def update_settings(self, body, query_params=None):
        """
        Change cluster-wide settings.

        :arg body: A mapping with a ``persistent`` key, a ``transient`` key, or
            both. Persistent settings survive a full cluster restart;
            transient ones don't.
        """
        return self._send('PUT', ['_cluster', 'settings'], body=body,
                          query_params=query_params)

    @es_kwargs('dry_run', 'explain', 'filter_metadata', 'master_timeout',
               'timeout')
    def reroute(self, body, query_params=None):
        """
        Explicitly execute cluster reroute allocation commands: move a shard
        from one node to another, cancel an allocation, or allocate an
        unassigned shard on a given node.

        :arg body: A mapping of reroute commands, like
            ``{'commands': [{'move': {...}}]}``
        """
        return self._send('POST', ['_cluster', 'reroute'], body=body,
                          query_params=query_params)

    @es_kwargs('delay', 'exit')
    def shutdown(self, query_params=None):
        """
        Shut down every node in the cluster.

        :arg delay: How long to wait before shutting down, like "10s"
        """
        return self._send('POST', ['_shutdown'], query_params=query_params)

    @es_kwargs('timeout', 'master_timeout')
    def aliases(self, actions, query_params=None):
        """
        Atomically add, remove, or update aliases.

        :arg actions: An action mapping or a list of them. Either way, they're
            wrapped into the ``{"actions": [...]}`` body the server expects::

                es.cluster.aliases({'add': {'index': 'users-1',
                                            'alias': 'users'}})

                es.cluster.aliases([
                    {'remove': {'index': 'users-1', 'alias': 'users'}},
                    {'add': {'index': 'users-2', 'alias': 'users'}}])
        """
        if isinstance(actions, Mapping):
            actions = [actions]
        return self._send('POST', ['_aliases'],
                          body={'actions': list(actions)},
                          query_params=query_params)

    @es_kwargs('local', 'ignore_unavailable', 'timeout')
    def get_aliases(self, index=None, query_params=None):
        """
        Retrieve the current aliases.

        :arg index: The name of an index or an iterable of indices from which
            to fetch aliases. An alias name works here too, since it stands in
            for an index. If omitted, look in all indices.
        """
        return self._send('GET',
                          [self.client._concat(index), '_aliases'],
                          query_params=query_params)
