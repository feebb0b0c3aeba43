"""
Not excessively hierarchical exception hierarchy.
"""


class ArcstreamException(Exception):
    pass


class InvalidKeySize(ArcstreamException, ValueError):
    pass


class NotReady(ArcstreamException):
    pass


class ReconfigureWhileActive(NotReady):
    pass
