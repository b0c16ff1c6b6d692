"""State/notification layer.

Units never talk to a reactive framework directly: every status, error and
data change goes through a :class:`~querykit.state.sinks.NotificationSink`.
This package holds the per-unit status state and the bundled sinks.
"""
