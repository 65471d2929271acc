import asyncio
import logging
import os.path as path
import ssl
import sys

from . import protocol

__all__ = ['Connection']

DEFAULT_CA_PATHS = {
    'linux': '/etc/ssl/certs',
    'linux2': '/etc/ssl/certs',
    'freebsd': '/etc/ssl/certs'
}


class Connection:
    """ A line-oriented TCP connection to the chat server. """
    CONNECT_TIMEOUT = 10

    def __init__(self, hostname, port, tls=False, tls_verify=True, source_address=None):
        self.hostname = hostname
        self.port = port
        self.source_address = source_address

        self.tls = tls
        self.tls_context = None
        self.tls_verify = tls_verify

        self.reader = None
        self.writer = None
        self.logger = logging.getLogger(__name__)

    async def connect(self):
        """ Connect to target. """
        self.tls_context = None

        if self.tls:
            self.tls_context = self.create_tls_context()

        (self.reader, self.writer) = await asyncio.wait_for(asyncio.open_connection(
            host=self.hostname,
            port=self.port,
            local_addr=self.source_address,
            ssl=self.tls_context
        ), timeout=self.CONNECT_TIMEOUT)

    def create_tls_context(self):
        """ Create the TLS context used to wrap our socket. """
        tls_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

        # - Disable compression in order to counter the CRIME attack.
        # - Disable session resumption to maintain perfect forward secrecy.
        for opt in ['NO_COMPRESSION', 'NO_TICKET']:
            if hasattr(ssl, 'OP_' + opt):
                tls_context.options |= getattr(ssl, 'OP_' + opt)

        if self.tls_verify:
            # Load certificate verification paths.
            tls_context.set_default_verify_paths()
            if sys.platform in DEFAULT_CA_PATHS and path.isdir(DEFAULT_CA_PATHS[sys.platform]):
                tls_context.load_verify_locations(capath=DEFAULT_CA_PATHS[sys.platform])
            tls_context.verify_mode = ssl.CERT_REQUIRED
            tls_context.check_hostname = True
        else:
            tls_context.check_hostname = False
            tls_context.verify_mode = ssl.CERT_NONE

        return tls_context

    async def disconnect(self):
        """ Disconnect from target. Any pending recv() sees end of stream. """
        if not self.connected:
            return

        self.writer.close()
        self.reader = None
        self.writer = None

    @property
    def connected(self):
        """ Whether this connection is... connected to something. """
        return self.reader is not None and self.writer is not None

    async def send(self, data, priority=protocol.Priority.NORMAL):
        """
        Write a line. Lines are written in call order; `priority` is a hint for throttled writers
        and is only logged here.
        """
        if priority >= protocol.Priority.CRITICAL:
            self.logger.debug('Writing critical line (%d bytes).', len(data))
        self.writer.write(data)
        await self.writer.drain()

    async def recv(self, *, timeout=None):
        """ Read one line. Returns an empty bytestring at end of stream. """
        reader = self.reader
        if reader is None:
            return b''
        return await asyncio.wait_for(reader.readline(), timeout=timeout)
