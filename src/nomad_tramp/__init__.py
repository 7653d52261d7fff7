"""Nomad TRAMP helper.

Resolves editor remote-access addresses of the form
``task@job.group.index%node`` to Nomad allocations via the Nomad HTTP API
and hands the terminal over to ``nomad exec``.
"""

__version__ = "0.1.0"
