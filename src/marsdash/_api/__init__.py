"""Upstream NASA endpoint mappers.

Each function builds one upstream request from the proxy's path parameters
and returns the decoded JSON. Failures surface as
:class:`marsdash.exceptions.UpstreamError`.
"""
