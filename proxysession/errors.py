"""Errors raised while driving an HTTP/1.x session."""


class SessionError(Exception):
    """An I/O or protocol failure on a downstream or upstream session."""